"""Progressive tax tables and the annual income-tax settlement."""

from dataclasses import dataclass, field
from decimal import Decimal

from campus_housing_sim.errors import InvalidAmountError
from campus_housing_sim.money import ONE, ZERO, cents, to_decimal

SALT_CAP = Decimal("10000")  # federal cap on state and local tax deductions (not indexed)


@dataclass
class TaxTable:
    """Marginal brackets as (lower threshold, rate) pairs, thresholds ascending from 0."""

    brackets: list[tuple[Decimal, Decimal]]

    @classmethod
    def from_pairs(cls, pairs, name: str = "brackets") -> "TaxTable":
        """Validate and convert configured [threshold, rate] pairs."""
        if not pairs:
            raise InvalidAmountError(f"{name}: at least one bracket is required")
        brackets: list[tuple[Decimal, Decimal]] = []
        for i, pair in enumerate(pairs):
            if not isinstance(pair, (list, tuple)) or len(pair) != 2:
                raise InvalidAmountError(f"{name}[{i}]: expected [threshold, rate]")
            threshold = to_decimal(pair[0], f"{name}[{i}].threshold")
            rate = to_decimal(pair[1], f"{name}[{i}].rate")
            if not ZERO <= rate <= ONE:
                raise InvalidAmountError(f"{name}[{i}].rate: {rate} is outside 0..1")
            if brackets and threshold <= brackets[-1][0]:
                raise InvalidAmountError(
                    f"{name}[{i}].threshold: {threshold} is not above {brackets[-1][0]}"
                )
            brackets.append((threshold, rate))
        if brackets[0][0] != ZERO:
            raise InvalidAmountError(f"{name}[0].threshold: first threshold must be 0")
        return cls(brackets)

    def copy(self) -> "TaxTable":
        return TaxTable(list(self.brackets))


def tax_owed(amount: Decimal, table: TaxTable) -> Decimal:
    """Tax on `amount` under the marginal brackets of `table`."""
    if amount <= 0:
        return ZERO
    total = ZERO
    brackets = table.brackets
    for i, (threshold, rate) in enumerate(brackets):
        if threshold >= amount:
            break
        upper = amount
        if i + 1 < len(brackets):
            upper = min(amount, brackets[i + 1][0])
        total += (upper - threshold) * rate
    return total


def inflate(table: TaxTable, factor: Decimal) -> None:
    """Scale every threshold by `factor`, in place."""
    table.brackets = [(threshold * factor, rate) for threshold, rate in table.brackets]


@dataclass
class TaxYear:
    """Snapshot of the indexed tax parameters in force for one tax year."""

    year: int
    federal: TaxTable
    state: TaxTable
    federal_standard_deduction: Decimal
    state_standard_deduction: Decimal
    payroll_tax_rate: Decimal
    payroll_wage_base: Decimal
    medicare_rate: Decimal
    medicare_surtax_rate: Decimal
    medicare_cutoff: Decimal
    salt_cap: Decimal = field(default=SALT_CAP)


@dataclass
class TaxReturn:
    year: int
    gross_payroll: Decimal
    agi: Decimal
    salt_deduction: Decimal
    mortgage_interest_deduction: Decimal
    points_deduction: Decimal
    federal_deduction: Decimal
    state_deduction: Decimal
    federal_tax: Decimal
    state_tax: Decimal
    payroll_tax: Decimal
    medicare_tax: Decimal
    total_tax: Decimal
    withholding: Decimal
    balance_due: Decimal  # positive = owed, negative = refund


def deductible_mortgage_interest(
    interest: Decimal, average_balance: Decimal, limit: Decimal,
) -> Decimal:
    """Mortgage interest deduction, pro-rated by limit / average balance above the limit.

    Linear scaling on the average outstanding acquisition debt is a
    simplification of the statutory worksheet, kept on purpose.
    """
    if interest <= 0:
        return ZERO
    if limit <= 0:
        return ZERO
    if average_balance > limit:
        return interest * limit / average_balance
    return interest


def payroll_tax(gross_payroll: Decimal, tax_year: TaxYear) -> Decimal:
    """Flat-rate payroll tax up to the wage base, for one earner."""
    return min(max(gross_payroll, ZERO), tax_year.payroll_wage_base) * tax_year.payroll_tax_rate


def medicare_tax(gross_payroll: Decimal, tax_year: TaxYear) -> Decimal:
    """Two-tier tax: base rate up to the cutoff, surtax rate on the excess."""
    if gross_payroll <= 0:
        return ZERO
    base = min(gross_payroll, tax_year.medicare_cutoff)
    excess = max(gross_payroll - tax_year.medicare_cutoff, ZERO)
    return base * tax_year.medicare_rate + excess * tax_year.medicare_surtax_rate


def settle_annual_taxes(primary, tax_year: TaxYear, settlement_year: int, spouse=None) -> TaxReturn:
    """Settle tax year `tax_year.year` for `primary` (and a jointly filing spouse).

    The spouse's accumulators for the year are moved into the primary's
    ledger first. The balance due is debited from (or a refund credited to)
    the primary's post-tax balance, and the escrowed withholding for the
    year is reset to zero.
    """
    year = tax_year.year
    ledger = primary.tax_ledger

    # Wage base applies per earner, so payroll tax is taken before the merge
    fica = payroll_tax(ledger.gross_payroll.get(year), tax_year)
    if spouse is not None:
        fica += payroll_tax(spouse.tax_ledger.gross_payroll.get(year), tax_year)
        ledger.merge_year(spouse.tax_ledger, year)

    gross = ledger.gross_payroll.get(year)
    agi = ledger.taxable_pay.get(year)
    salt = min(
        tax_year.salt_cap,
        ledger.state_income_tax_paid.get(year) + ledger.property_tax_paid.get(year),
    )
    mortgage_interest = deductible_mortgage_interest(
        ledger.mortgage_interest_paid.get(year),
        ledger.average_mortgage_balance(year),
        primary.deductible_mortgage_limit,
    )
    points = ledger.points_paid.get(year)

    federal_deduction = max(tax_year.federal_standard_deduction, salt + mortgage_interest + points)
    state_deduction = max(tax_year.state_standard_deduction, mortgage_interest + points)
    federal_tax = cents(tax_owed(agi - federal_deduction, tax_year.federal))
    state_tax = cents(tax_owed(agi - state_deduction, tax_year.state))
    fica = cents(fica)
    medicare = cents(medicare_tax(gross, tax_year))
    total = federal_tax + state_tax + fica + medicare

    withholding = ledger.escrowed_withholding.get(year)
    due = total - withholding
    primary.balance_posttax -= due
    ledger.escrowed_withholding.reset(year)
    ledger.state_income_tax_paid.add(settlement_year, state_tax)

    return TaxReturn(
        year=year,
        gross_payroll=gross,
        agi=agi,
        salt_deduction=salt,
        mortgage_interest_deduction=cents(mortgage_interest),
        points_deduction=points,
        federal_deduction=cents(federal_deduction),
        state_deduction=cents(state_deduction),
        federal_tax=federal_tax,
        state_tax=state_tax,
        payroll_tax=fica,
        medicare_tax=medicare,
        total_tax=total,
        withholding=withholding,
        balance_due=due,
    )
