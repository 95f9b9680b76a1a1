"""Per-person, per-tax-year accumulators that feed the annual settlement."""

from dataclasses import dataclass, field, fields
from decimal import Decimal

from campus_housing_sim.errors import InvariantViolation
from campus_housing_sim.money import ZERO


class YearlyAmounts:
    """Year → accumulated amount. Entries are created on first write."""

    def __init__(self, name: str):
        self.name = name
        self._by_year: dict[int, Decimal] = {}

    def add(self, year: int, amount: Decimal) -> None:
        if amount < 0:
            raise InvariantViolation(f"{self.name}[{year}]: cannot add negative amount {amount}")
        self._by_year[year] = self._by_year.get(year, ZERO) + amount

    def get(self, year: int) -> Decimal:
        return self._by_year.get(year, ZERO)

    def take(self, year: int) -> Decimal:
        """Return the year's amount and zero it (used to transfer between ledgers)."""
        amount = self._by_year.get(year, ZERO)
        if year in self._by_year:
            self._by_year[year] = ZERO
        return amount

    def reset(self, year: int) -> None:
        if year in self._by_year:
            self._by_year[year] = ZERO

    def years(self) -> list[int]:
        return sorted(self._by_year)

    def __repr__(self) -> str:
        return f"YearlyAmounts({self.name!r}, {self._by_year!r})"


def _category(name: str):
    return field(default_factory=lambda: YearlyAmounts(name))


@dataclass
class TaxLedger:
    gross_payroll: YearlyAmounts = _category("gross_payroll")
    taxable_pay: YearlyAmounts = _category("taxable_pay")
    escrowed_withholding: YearlyAmounts = _category("escrowed_withholding")
    state_income_tax_paid: YearlyAmounts = _category("state_income_tax_paid")
    property_tax_paid: YearlyAmounts = _category("property_tax_paid")
    mortgage_interest_paid: YearlyAmounts = _category("mortgage_interest_paid")
    points_paid: YearlyAmounts = _category("points_paid")
    # Sum over the year of each day's outstanding acquisition debt
    mortgage_balance_days: YearlyAmounts = _category("mortgage_balance_days")
    mortgage_days: YearlyAmounts = _category("mortgage_days")

    def record_mortgage_balance(self, year: int, balance: Decimal) -> None:
        self.mortgage_balance_days.add(year, balance)
        self.mortgage_days.add(year, Decimal(1))

    def average_mortgage_balance(self, year: int) -> Decimal:
        days = self.mortgage_days.get(year)
        if days == 0:
            return ZERO
        return self.mortgage_balance_days.get(year) / days

    def merge_year(self, other: "TaxLedger", year: int) -> None:
        """Move every accumulator of `other` for `year` into this ledger (joint filing)."""
        for f in fields(self):
            getattr(self, f.name).add(year, getattr(other, f.name).take(year))

    def unsettled_withholding_years(self, through_year: int) -> list[int]:
        """Tax years up to through_year whose escrowed withholding did not net to zero."""
        return [
            year for year in self.escrowed_withholding.years()
            if year <= through_year and self.escrowed_withholding.get(year) != 0
        ]
