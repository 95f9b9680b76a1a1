"""Level-payment amortization schedule for a fixed-rate, fixed-term loan."""

from decimal import Decimal

from campus_housing_sim.errors import InvariantViolation
from campus_housing_sim.money import ONE, ZERO

MONTHS_PER_YEAR = 12


class AmortizationSchedule:
    """Monthly schedule for `principal` at `annual_rate` over `total_periods` payments."""

    def __init__(self, principal: Decimal, annual_rate: Decimal, total_periods: int):
        if total_periods <= 0:
            raise InvariantViolation(f"amortization term must be positive, got {total_periods}")
        if principal < 0:
            raise InvariantViolation(f"negative loan principal {principal}")
        self.principal = principal
        self.annual_rate = annual_rate
        self.total_periods = total_periods
        self.rate = annual_rate / MONTHS_PER_YEAR
        self._payment = self._level_payment()

    def _level_payment(self) -> Decimal:
        """Standard annuity payment P·r / (1 - (1+r)^-n)."""
        if self.rate == 0:
            return self.principal / self.total_periods
        r = self.rate
        return self.principal * r / (ONE - (ONE + r) ** -self.total_periods)

    def payment(self) -> Decimal:
        return self._payment

    def balance_after(self, period: int) -> Decimal:
        """Outstanding balance once `period` payments have been made (0 ≤ period ≤ n)."""
        if not 0 <= period <= self.total_periods:
            raise InvariantViolation(f"period {period} outside 0..{self.total_periods}")
        if self.rate == 0:
            return self.principal - self._payment * period
        growth = (ONE + self.rate) ** period
        return self.principal * growth - self._payment * (growth - ONE) / self.rate

    def interest(self, period: int) -> Decimal:
        """Interest portion of the 1-based `period`-th payment."""
        if not 1 <= period <= self.total_periods:
            raise InvariantViolation(f"payment index {period} outside 1..{self.total_periods}")
        if self.rate == 0:
            return ZERO
        return self.balance_after(period - 1) * self.rate

    def principal_portion(self, period: int) -> Decimal:
        return self._payment - self.interest(period)
