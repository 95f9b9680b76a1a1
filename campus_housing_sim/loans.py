"""The five credit instruments financing the home, and the stack that holds them.

MAP  shared-appreciation loan: interest accrues daily and compounds monthly
     as deferred interest; a lower "current" rate is paid in cash each pay
     period; at sale the lender takes a share of appreciation, capped at the
     deferred interest.
DIP  subsidy loan repaid at par plus a pro-rata appreciation share.
RIP  subsidy loan repaid at par.
ZIP  subsidy loan repaid at par, paid down by the employer each December.
SFCU conventional fixed-rate amortizing mortgage.
"""

from dataclasses import dataclass, field
from decimal import Decimal

from campus_housing_sim.amortization import AmortizationSchedule
from campus_housing_sim.errors import InvariantViolation
from campus_housing_sim.money import PAY_PERIODS_PER_YEAR, ZERO, cents

DAYS_PER_INTEREST_YEAR = 365  # MAP daily accrual basis


def appreciation_share(balance: Decimal, purchase_price: Decimal, appreciation: Decimal) -> Decimal:
    """Lender's pro-rata share of appreciation: balance / price × appreciation (0 if none)."""
    if appreciation <= 0 or purchase_price <= 0:
        return ZERO
    return balance / purchase_price * appreciation


@dataclass
class SharedAppreciationLoan:
    principal: Decimal = ZERO
    cumulative_deferred_interest: Decimal = ZERO
    interest_accrued_this_period: Decimal = ZERO
    overall_rate: Decimal = ZERO
    current_rate: Decimal = ZERO

    def originate(self, principal: Decimal, overall_rate: Decimal, current_rate: Decimal) -> None:
        if self.principal or self.cumulative_deferred_interest or self.interest_accrued_this_period:
            raise InvariantViolation("MAP: origination while a balance is outstanding")
        self.principal = principal
        self.overall_rate = overall_rate
        self.current_rate = current_rate

    def accrue_day(self) -> None:
        """Accrue one day of overall-rate interest on principal plus deferred interest."""
        base = self.principal + self.cumulative_deferred_interest
        self.interest_accrued_this_period += base * self.overall_rate / DAYS_PER_INTEREST_YEAR

    def compound(self) -> None:
        """Fold the period's net accrual into the deferred balance (monthly anniversary)."""
        self.cumulative_deferred_interest += self.interest_accrued_this_period
        self.interest_accrued_this_period = ZERO
        if self.cumulative_deferred_interest < 0:
            raise InvariantViolation(
                f"MAP: deferred interest went negative ({self.cumulative_deferred_interest})"
            )

    def current_interest_due(self) -> Decimal:
        return cents(self.principal * self.current_rate / PAY_PERIODS_PER_YEAR)

    def pay_current_interest(self) -> Decimal:
        """Cash interest for one pay period; it offsets the period's accrual."""
        amount = self.current_interest_due()
        self.interest_accrued_this_period -= amount
        return amount

    @property
    def deferred_interest(self) -> Decimal:
        """Deferred interest outstanding, including the open period's net accrual."""
        return max(self.cumulative_deferred_interest + self.interest_accrued_this_period, ZERO)

    def sale_interest(self, purchase_price: Decimal, appreciation: Decimal) -> Decimal:
        """Contingent interest owed at sale: appreciation share capped at deferred interest."""
        share = appreciation_share(self.principal, purchase_price, appreciation)
        return min(share, self.deferred_interest)

    def retire(self) -> None:
        self.principal = ZERO
        self.cumulative_deferred_interest = ZERO
        self.interest_accrued_this_period = ZERO

    @property
    def is_clear(self) -> bool:
        return not (self.principal or self.cumulative_deferred_interest or self.interest_accrued_this_period)


@dataclass
class SubsidyLoan:
    name: str
    balance: Decimal = ZERO
    shares_appreciation: bool = False

    def originate(self, amount: Decimal) -> None:
        if self.balance:
            raise InvariantViolation(f"{self.name}: origination while a balance is outstanding")
        if amount < 0:
            raise InvariantViolation(f"{self.name}: negative origination amount {amount}")
        self.balance = amount

    def pay_down(self, amount: Decimal) -> Decimal:
        if amount < 0 or amount > self.balance:
            raise InvariantViolation(f"{self.name}: paydown {amount} exceeds balance {self.balance}")
        self.balance -= amount
        return amount

    def sale_share(self, purchase_price: Decimal, appreciation: Decimal) -> Decimal:
        if not self.shares_appreciation:
            return ZERO
        return appreciation_share(self.balance, purchase_price, appreciation)

    def retire(self) -> None:
        self.balance = ZERO

    @property
    def is_clear(self) -> bool:
        return not self.balance


@dataclass
class AmortizingLoan:
    name: str = "SFCU"
    balance: Decimal = ZERO
    payments_made: int = 0
    schedule: AmortizationSchedule | None = None

    def originate(self, principal: Decimal, annual_rate: Decimal, term_months: int) -> None:
        if self.balance:
            raise InvariantViolation(f"{self.name}: origination while a balance is outstanding")
        self.schedule = AmortizationSchedule(principal, annual_rate, term_months)
        self.balance = principal
        self.payments_made = 0

    @property
    def term_months(self) -> int:
        return self.schedule.total_periods if self.schedule else 0

    def make_payment(self) -> tuple[Decimal, Decimal]:
        """Make the next scheduled payment. Returns (interest, principal) in cents.

        The last payment retires whatever balance the cent rounding left.
        """
        if self.schedule is None or self.balance == 0:
            return ZERO, ZERO
        period = self.payments_made + 1
        interest = cents(self.schedule.interest(period))
        if period == self.schedule.total_periods:
            principal = self.balance
        else:
            principal = min(cents(self.schedule.payment()) - interest, self.balance)
        self.balance -= principal
        self.payments_made = period
        if self.balance < 0:
            raise InvariantViolation(f"{self.name}: balance went negative ({self.balance})")
        return interest, principal

    def retire(self) -> None:
        self.balance = ZERO

    @property
    def is_clear(self) -> bool:
        return not self.balance


@dataclass
class LoanStack:
    map: SharedAppreciationLoan = field(default_factory=SharedAppreciationLoan)
    dip: SubsidyLoan = field(default_factory=lambda: SubsidyLoan("DIP", shares_appreciation=True))
    rip: SubsidyLoan = field(default_factory=lambda: SubsidyLoan("RIP"))
    zip: SubsidyLoan = field(default_factory=lambda: SubsidyLoan("ZIP"))
    sfcu: AmortizingLoan = field(default_factory=AmortizingLoan)

    def is_clear(self) -> bool:
        return all(loan.is_clear for loan in (self.map, self.dip, self.rip, self.zip, self.sfcu))

    def acquisition_debt(self) -> Decimal:
        """Outstanding principal across all five instruments."""
        return (
            self.map.principal + self.dip.balance + self.rip.balance
            + self.zip.balance + self.sfcu.balance
        )

    def retire_all(self) -> None:
        for loan in (self.map, self.dip, self.rip, self.zip, self.sfcu):
            loan.retire()
