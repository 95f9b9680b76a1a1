"""Fixed-point money helpers built on decimal.Decimal."""

from decimal import ROUND_HALF_EVEN, Decimal, InvalidOperation

from campus_housing_sim.errors import InvalidAmountError

ZERO = Decimal("0")
ONE = Decimal("1")
CENT = Decimal("0.01")
DAYS_PER_YEAR = Decimal("365.25")  # continuous-compounding year
PAY_PERIODS_PER_YEAR = 24          # semi-monthly payroll


def to_decimal(value, name: str = "value") -> Decimal:
    """Convert a configuration number to Decimal via its string form.

    Floats go through str() so 0.1 becomes Decimal("0.1"), not the binary
    expansion. Booleans, None, NaN and infinities are rejected.
    """
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise InvalidAmountError(f"{name}: expected a number, got {value!r}")
    else:
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation:
            raise InvalidAmountError(f"{name}: expected a number, got {value!r}") from None
    if not result.is_finite():
        raise InvalidAmountError(f"{name}: expected a finite number, got {value!r}")
    return result


def cents(amount: Decimal) -> Decimal:
    """Round to whole cents (banker's rounding)."""
    return amount.quantize(CENT, rounding=ROUND_HALF_EVEN)


def daily_factor(annual_rate: Decimal) -> Decimal:
    """Daily growth factor equivalent to compounding annual_rate over 365.25 days."""
    return (ONE + annual_rate) ** (ONE / DAYS_PER_YEAR)
