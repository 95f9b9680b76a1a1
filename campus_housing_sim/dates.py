"""Calendar: bidirectional mapping between YYYY-MM-DD strings and day indexes.

A day index counts days since 1970-01-01, so consecutive calendar days are
consecutive integers and date arithmetic is plain integer arithmetic.
"""

import calendar
import re
from datetime import date, timedelta

from campus_housing_sim.errors import InvalidDateError

EPOCH = date(1970, 1, 1)
DATE_PATTERN = re.compile(r"20\d\d-\d\d-\d\d")


def to_day(date_string: str | None) -> int:
    """Parse a YYYY-MM-DD string into a day index."""
    if not isinstance(date_string, str) or not DATE_PATTERN.fullmatch(date_string):
        raise InvalidDateError(f"invalid date {date_string!r}: expected 20YY-MM-DD")
    try:
        parsed = date.fromisoformat(date_string)
    except ValueError:
        raise InvalidDateError(f"invalid date {date_string!r}: no such calendar day") from None
    return (parsed - EPOCH).days


def to_date(day: int) -> str:
    """Format a day index as YYYY-MM-DD, checking the round trip."""
    if isinstance(day, bool) or not isinstance(day, int):
        raise InvalidDateError(f"invalid day index {day!r}")
    try:
        text = (EPOCH + timedelta(days=day)).isoformat()
    except OverflowError:
        raise InvalidDateError(f"day index {day} is out of range") from None
    if not DATE_PATTERN.fullmatch(text) or to_day(text) != day:
        raise InvalidDateError(f"day index {day} does not map to a 20YY date")
    return text


def date_of(day: int) -> date:
    return EPOCH + timedelta(days=day)


def day_of(d: date) -> int:
    return (d - EPOCH).days


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def is_monthly_anniversary(day: int, origin_day: int) -> bool:
    """True on each later month's counterpart of origin_day.

    Origins on the 29th-31st fall on the last day of shorter months.
    """
    if day <= origin_day:
        return False
    d = date_of(day)
    origin = date_of(origin_day)
    return d.day == min(origin.day, days_in_month(d.year, d.month))


def is_yearly_anniversary(day: int, origin_day: int) -> bool:
    """True on origin_day itself and on each later year's counterpart (Feb 29 → Feb 28)."""
    if day < origin_day:
        return False
    d = date_of(day)
    origin = date_of(origin_day)
    if d.month != origin.month:
        return False
    return d.day == min(origin.day, days_in_month(d.year, d.month))


def months_between(start_day: int, end_day: int) -> int:
    """Whole calendar months elapsed from start_day to end_day."""
    a = date_of(start_day)
    b = date_of(end_day)
    months = (b.year - a.year) * 12 + (b.month - a.month)
    if b.day < min(a.day, days_in_month(b.year, b.month)):
        months -= 1
    return months


def add_years(day: int, years: int) -> int:
    """Same month and day `years` later; Feb 29 maps to Feb 28 in common years."""
    d = date_of(day)
    year = d.year + years
    return day_of(date(year, d.month, min(d.day, days_in_month(year, d.month))))
