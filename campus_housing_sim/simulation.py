"""Core simulation engine: the day-stepping driver."""

import calendar
from dataclasses import dataclass, field
from decimal import Decimal

from campus_housing_sim.dates import add_years, date_of, to_date, to_day
from campus_housing_sim.money import ONE, ZERO, cents, to_decimal
from campus_housing_sim.params import SimulationParams, validate_params
from campus_housing_sim.payroll import is_pay_day, run_payroll
from campus_housing_sim.person import Person
from campus_housing_sim.real_estate import (
    LoanSizing,
    Property,
    SaleSettlement,
    home_equity,
    purchase_property,
    run_housing_events,
    sell_property,
)
from campus_housing_sim.state import SimulationState, apply_annual_indexing
from campus_housing_sim.tax import TaxReturn, settle_annual_taxes

# Calendar of recurring events
SALARY_RAISE_MONTH = 9         # raises take effect September 1
TAX_SETTLEMENT_DATE = (4, 15)  # settles the previous tax year
ENDING_LINE_YEARS = 10         # display-only line pinned past the horizon


@dataclass
class DailyRecord:
    """Household balances on one day, in start-date currency."""

    date: str
    pretax: Decimal
    posttax: Decimal
    equity: Decimal

    @property
    def net_worth(self) -> Decimal:
        return self.pretax + self.posttax + self.equity


@dataclass
class SimulationResult:
    daily: list[DailyRecord]
    ending: DailyRecord
    tax_returns: list[TaxReturn] = field(default_factory=list)
    purchase: LoanSizing | None = None
    sale: SaleSettlement | None = None
    warnings: list[str] = field(default_factory=list)
    people: list[Person] = field(default_factory=list)
    home: Property | None = None

    @property
    def final(self) -> DailyRecord:
        return self.daily[-1]

    def yearly_records(self) -> list[DailyRecord]:
        """First record of each calendar year plus the last day."""
        records = []
        seen: set[str] = set()
        for record in self.daily:
            year = record.date[:4]
            if year not in seen:
                seen.add(year)
                records.append(record)
        if records[-1] is not self.daily[-1]:
            records.append(self.daily[-1])
        return records


def build_household(params: SimulationParams) -> list[Person]:
    """Buyer first; the spouse (if any) files jointly with the buyer."""
    people = [
        Person(
            name=params.buyer_name,
            salary=to_decimal(params.buyer_salary, "buyer_salary"),
            medical_deduction=to_decimal(params.buyer_medical_deduction),
            nonhousing_annual_spending=to_decimal(params.buyer_nonhousing_spending),
            balance_pretax=to_decimal(params.buyer_balance_pretax),
            balance_posttax=to_decimal(params.buyer_balance_posttax),
            subsidy_budget_remaining=to_decimal(params.buyer_zip_budget),
        )
    ]
    if params.has_spouse:
        people.append(
            Person(
                name=params.spouse_name,
                salary=to_decimal(params.spouse_salary, "spouse_salary"),
                medical_deduction=to_decimal(params.spouse_medical_deduction),
                nonhousing_annual_spending=to_decimal(params.spouse_nonhousing_spending),
                balance_pretax=to_decimal(params.spouse_balance_pretax),
                balance_posttax=to_decimal(params.spouse_balance_posttax),
            )
        )
    return people


def _apply_scheduled_updates(state: SimulationState, params: SimulationParams, day: int, first: bool) -> None:
    d = date_of(day)
    if not first:
        state.cpi *= state.daily_inflation
    if d.month == 1 and d.day == 1 and d.year > state.year:
        apply_annual_indexing(state, params, d.year)


def _apply_salary_step_ups(people: list[Person], state: SimulationState, day: int, first: bool) -> None:
    d = date_of(day)
    if first or d.month != SALARY_RAISE_MONTH or d.day != 1:
        return
    for person in people:
        person.salary = cents(person.salary * (ONE + state.raise_rate))


def _apply_personal_inflation(people: list[Person], state: SimulationState, day: int, first: bool) -> None:
    d = date_of(day)
    if first or d.month != 1 or d.day != 1:
        return
    medical_factor = ONE + state.policy.medical_inflation
    for person in people:
        person.medical_deduction = cents(person.medical_deduction * medical_factor)
        person.nonhousing_annual_spending = cents(person.nonhousing_annual_spending * state.indexing_factor)


def _accrue_cash_interest(people: list[Person], state: SimulationState) -> None:
    for person in people:
        if person.balance_pretax > 0:
            person.balance_pretax *= state.daily_pretax_growth
        if person.balance_posttax > 0:
            person.balance_posttax *= state.daily_posttax_growth


def _run_payroll(people: list[Person], state: SimulationState, day: int) -> None:
    d = date_of(day)
    if not is_pay_day(d.day):
        return
    policy = state.policy
    for person in people:
        run_payroll(person, d.year, policy.pretax_savings_rate, policy.withholding_rate)


def _settle_taxes(people: list[Person], state: SimulationState, day: int) -> TaxReturn | None:
    d = date_of(day)
    if (d.month, d.day) != TAX_SETTLEMENT_DATE:
        return None
    tax_year = state.tax_year(d.year - 1)
    if tax_year is None:
        return None
    spouse = people[1] if len(people) > 1 else None
    result = settle_annual_taxes(people[0], tax_year, d.year, spouse)
    state.settled_through = tax_year.year
    return result


def daily_spending(annual: Decimal, day: int) -> Decimal:
    """Cents charged for one day of annual spending.

    Each day takes the difference of the rounded year-to-date totals, so a
    full calendar year charges exactly ``annual``.
    """
    d = date_of(day)
    days_in_year = Decimal(366 if calendar.isleap(d.year) else 365)
    elapsed = d.timetuple().tm_yday
    return cents(annual * elapsed / days_in_year) - cents(annual * (elapsed - 1) / days_in_year)


def _pay_living_expenses(people: list[Person], state: SimulationState, home: Property, day: int) -> None:
    for person in people:
        person.balance_posttax -= daily_spending(person.nonhousing_annual_spending, day)
    if date_of(day).day == 1 and not home.is_owned and state.policy.rent_monthly:
        people[0].balance_posttax -= cents(state.policy.rent_monthly * state.cpi)


def _record(people: list[Person], home: Property, state: SimulationState, day: int) -> DailyRecord:
    pretax = sum((p.balance_pretax for p in people), ZERO)
    posttax = sum((p.balance_posttax for p in people), ZERO)
    equity = home_equity(home, day)
    return DailyRecord(
        date=to_date(day),
        pretax=cents(pretax / state.cpi),
        posttax=cents(posttax / state.cpi),
        equity=cents(equity / state.cpi),
    )


def _integrity_warnings(people: list[Person], state: SimulationState) -> list[str]:
    warnings: list[str] = []
    if state.settled_through is None:
        return warnings
    for person in people:
        ledger = person.tax_ledger
        for year in ledger.unsettled_withholding_years(state.settled_through):
            warnings.append(
                f"tax year {year}: escrowed withholding {ledger.escrowed_withholding.get(year)}"
                f" for {person.name} did not net to zero"
            )
    return warnings


def simulate(params: SimulationParams) -> SimulationResult:
    """Run one deterministic pass from start_date to end_date inclusive.

    Each day runs, in this order: scheduled-rate updates, salary step-ups,
    personal/medical inflation, interest on cash, payroll, tax settlement,
    living expenses, purchase, housing events, sale, daily record.
    Reordering these stages changes the numbers.
    """
    validate_params(params)
    start = to_day(params.start_date)
    end = to_day(params.end_date)
    purchase_day = to_day(params.purchase_date) if params.purchase_date else None
    sale_day = to_day(params.sale_date) if params.sale_date else None

    state = SimulationState.from_params(params, date_of(start).year)
    people = build_household(params)
    buyer = people[0]
    home = Property(
        fmv=to_decimal(params.home_fmv, "home_fmv"),
        ground_lease_fraction=state.policy.ground_lease_fraction,
        appreciation_cap=state.policy.appreciation_cap,
    )

    daily: list[DailyRecord] = []
    tax_returns: list[TaxReturn] = []
    purchase = None
    sale = None
    for day in range(start, end + 1):
        first = day == start
        _apply_scheduled_updates(state, params, day, first)
        _apply_salary_step_ups(people, state, day, first)
        _apply_personal_inflation(people, state, day, first)
        _accrue_cash_interest(people, state)
        _run_payroll(people, state, day)
        tax_return = _settle_taxes(people, state, day)
        if tax_return is not None:
            tax_returns.append(tax_return)
        _pay_living_expenses(people, state, home, day)
        if day == purchase_day:
            purchase = purchase_property(
                home, buyer, state.policy, day,
                mortgage_limit=to_decimal(params.get_mortgage_limit(day)),
                hap_periods=params.get_hap_periods(day),
            )
        run_housing_events(home, buyer, state, day)
        if day == sale_day:
            sale = sell_property(home, buyer, state.policy, day)
        daily.append(_record(people, home, state, day))

    last = daily[-1]
    ending = DailyRecord(
        date=to_date(add_years(end, ENDING_LINE_YEARS)),
        pretax=last.pretax,
        posttax=last.posttax,
        equity=last.equity,
    )
    return SimulationResult(
        daily=daily,
        ending=ending,
        tax_returns=tax_returns,
        purchase=purchase,
        sale=sale,
        warnings=_integrity_warnings(people, state),
        people=people,
        home=home,
    )
