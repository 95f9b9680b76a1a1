"""Household members: balances, salary, housing allowance and tax ledger."""

from dataclasses import dataclass, field
from decimal import Decimal

from campus_housing_sim.errors import InvariantViolation
from campus_housing_sim.ledger import TaxLedger
from campus_housing_sim.money import ZERO

UNINITIALIZED = -1


@dataclass
class Person:
    name: str
    salary: Decimal  # per pay period
    medical_deduction: Decimal = ZERO  # annual premium, deducted pre-tax
    nonhousing_annual_spending: Decimal = ZERO
    balance_pretax: Decimal = ZERO
    balance_posttax: Decimal = ZERO
    subsidy_budget_remaining: Decimal = ZERO  # lifetime ZIP allowance
    subsidy_amount: Decimal = ZERO
    subsidy_decrement: Decimal = ZERO
    subsidy_periods_per_step: int = 0
    subsidy_periods_remaining: int = UNINITIALIZED
    subsidy_delay: bool = False
    deductible_mortgage_limit: Decimal = ZERO
    tax_ledger: TaxLedger = field(default_factory=TaxLedger)

    @property
    def has_subsidy(self) -> bool:
        return self.subsidy_amount > 0

    def award_subsidy(self, amount: Decimal, decrement: Decimal, periods_per_step: int) -> None:
        """Start the housing allowance; the first paycheck after the award carries none."""
        if self.has_subsidy:
            raise InvariantViolation(f"{self.name}: housing allowance already active")
        self.subsidy_amount = amount
        self.subsidy_decrement = decrement
        self.subsidy_periods_per_step = periods_per_step
        self.subsidy_periods_remaining = UNINITIALIZED
        self.subsidy_delay = True

    def cancel_subsidy(self) -> None:
        self.subsidy_amount = ZERO
        self.subsidy_periods_remaining = UNINITIALIZED
        self.subsidy_delay = False

    def next_subsidy(self) -> Decimal:
        """Allowance carried by this paycheck, advancing the decay countdown."""
        if self.subsidy_delay:
            self.subsidy_delay = False
            return ZERO
        if not self.has_subsidy:
            return ZERO
        if self.subsidy_periods_remaining == UNINITIALIZED:
            self.subsidy_periods_remaining = self.subsidy_periods_per_step
        elif self.subsidy_periods_remaining == 0:
            self.subsidy_amount = max(self.subsidy_amount - self.subsidy_decrement, ZERO)
            self.subsidy_periods_remaining = self.subsidy_periods_per_step
        self.subsidy_periods_remaining -= 1
        return self.subsidy_amount
