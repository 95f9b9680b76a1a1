"""Semi-monthly payroll: allowance, pre-tax savings, medical premium, withholding."""

from dataclasses import dataclass
from decimal import Decimal

from campus_housing_sim.errors import InvariantViolation
from campus_housing_sim.money import PAY_PERIODS_PER_YEAR, ZERO, cents
from campus_housing_sim.person import Person

PAY_DAYS = (7, 22)  # days of month


@dataclass
class Paycheck:
    gross: Decimal
    subsidy: Decimal
    pretax_savings: Decimal
    medical: Decimal
    taxable: Decimal
    withholding: Decimal
    net: Decimal


def is_pay_day(day_of_month: int) -> bool:
    return day_of_month in PAY_DAYS


def run_payroll(
    person: Person, year: int, pretax_savings_rate: Decimal, withholding_rate: Decimal,
) -> Paycheck:
    """Pay one period's salary plus allowance and post it to balances and ledger."""
    subsidy = person.next_subsidy()
    gross = cents(person.salary + subsidy)
    savings = cents(person.salary * pretax_savings_rate)
    if gross < savings:
        raise InvariantViolation(
            f"{person.name}: gross pay {gross} below mandatory pre-tax savings {savings}"
        )
    medical = cents(person.medical_deduction / PAY_PERIODS_PER_YEAR)
    taxable = gross - savings - medical
    withholding = cents(max(taxable, ZERO) * withholding_rate)
    net = taxable - withholding

    person.balance_pretax += savings
    person.balance_posttax += net
    ledger = person.tax_ledger
    ledger.gross_payroll.add(year, gross)
    ledger.taxable_pay.add(year, max(taxable, ZERO))
    ledger.escrowed_withholding.add(year, withholding)
    return Paycheck(gross, subsidy, savings, medical, taxable, withholding, net)


def pay_supplemental(person: Person, year: int, amount: Decimal, withholding_rate: Decimal) -> Decimal:
    """Book employer-paid income that never reaches the employee as cash.

    Used for the December ZIP paydown: the amount is taxable payroll and its
    withholding comes out of the post-tax balance. Returns the withholding.
    """
    withholding = cents(amount * withholding_rate)
    person.balance_posttax -= withholding
    ledger = person.tax_ledger
    ledger.gross_payroll.add(year, amount)
    ledger.taxable_pay.add(year, amount)
    ledger.escrowed_withholding.add(year, withholding)
    return withholding
