"""Ground-leased home: purchase, daily value accrual, housing costs, sale waterfall."""

import enum
from dataclasses import dataclass, field
from decimal import Decimal

from campus_housing_sim.dates import date_of, is_monthly_anniversary, is_yearly_anniversary, months_between
from campus_housing_sim.errors import InvariantViolation
from campus_housing_sim.loans import LoanStack
from campus_housing_sim.money import DAYS_PER_YEAR, ONE, ZERO, cents
from campus_housing_sim.payroll import PAY_DAYS, pay_supplemental
from campus_housing_sim.person import Person
from campus_housing_sim.state import Policy, SimulationState

ASSESSMENT_MONTH = 7                    # July 1: new fiscal-year assessment
PROPERTY_TAX_DATES = ((12, 10), (4, 10))  # two equal installments
ZIP_PAYDOWN_MONTH = 12
ZIP_ORIGINATION_CUTOFF = (6, 30)        # originated after this → no paydown that December


class OwnershipStatus(enum.Enum):
    UNOWNED = "unowned"
    OWNED = "owned"
    SOLD = "sold"


@dataclass
class LoanSizing:
    price: Decimal
    down_payment: Decimal
    map: Decimal
    dip: Decimal
    rip: Decimal
    zip: Decimal
    sfcu: Decimal

    @property
    def loan_total(self) -> Decimal:
        return self.map + self.dip + self.rip + self.zip + self.sfcu


@dataclass
class SaleSettlement:
    sale_price: Decimal
    appreciation: Decimal
    map_principal: Decimal
    map_interest: Decimal
    dip_principal: Decimal
    dip_share: Decimal
    rip: Decimal
    zip: Decimal
    sfcu: Decimal
    net_proceeds: Decimal

    @property
    def total_payoff(self) -> Decimal:
        return (
            self.map_principal + self.map_interest + self.dip_principal + self.dip_share
            + self.rip + self.zip + self.sfcu
        )


@dataclass
class Property:
    fmv: Decimal
    ground_lease_fraction: Decimal
    appreciation_cap: Decimal
    fmv_at_purchase: Decimal = ZERO
    purchase_price: Decimal = ZERO
    tax_assessment: Decimal = ZERO
    purchase_day: int | None = None
    status: OwnershipStatus = OwnershipStatus.UNOWNED
    loans: LoanStack = field(default_factory=LoanStack)

    @property
    def is_owned(self) -> bool:
        return self.status is OwnershipStatus.OWNED

    def appreciate(self, daily_appreciation: Decimal) -> None:
        """One day of continuous FMV growth; the value freezes once sold."""
        if self.status is not OwnershipStatus.SOLD:
            self.fmv *= daily_appreciation

    def step_assessment(self, inflation_rate: Decimal, cap_rate: Decimal) -> None:
        """Yearly assessed-value step, capped at cap_rate."""
        self.tax_assessment *= ONE + min(inflation_rate, cap_rate)

    def years_held(self, day: int) -> Decimal:
        return Decimal(day - self.purchase_day) / DAYS_PER_YEAR

    def capped_value(self, day: int) -> Decimal:
        """FMV ceiling for resale: purchase FMV grown at the appreciation cap."""
        return self.fmv_at_purchase * self.appreciation_cap ** self.years_held(day)

    def sale_price(self, day: int, known_sale_price: Decimal | None = None) -> Decimal:
        capped_price = cents(min(self.fmv, self.capped_value(day)) * self.ground_lease_fraction)
        if known_sale_price is None:
            return capped_price
        if known_sale_price < capped_price:
            raise InvariantViolation(
                f"known sale price {known_sale_price} is below the capped resale price {capped_price}"
            )
        return known_sale_price


def size_loans(price: Decimal, policy: Policy, buyer: Person) -> LoanSizing:
    """Size each subsidy loan as min(share of price, cap, remaining room); SFCU takes the rest."""
    down = cents(price * policy.min_down_fraction)
    room = price - down

    def take(fraction: Decimal, cap: Decimal, *extra_caps: Decimal) -> Decimal:
        nonlocal room
        amount = max(min(cents(price * fraction), cap, room, *extra_caps), ZERO)
        room -= amount
        return amount

    map_amount = take(policy.map_price_fraction, policy.map_cap)
    dip = take(policy.dip_price_fraction, policy.dip_cap)
    rip = take(policy.rip_price_fraction, policy.rip_cap)
    zip_amount = take(policy.zip_price_fraction, policy.zip_cap, buyer.subsidy_budget_remaining)
    return LoanSizing(price, down, map_amount, dip, rip, zip_amount, sfcu=room)


def purchase_property(
    prop: Property, buyer: Person, policy: Policy, day: int,
    mortgage_limit: Decimal, hap_periods: int,
) -> LoanSizing:
    """UNOWNED → OWNED: originate the loan stack, pay closing, start the allowance."""
    if prop.status is not OwnershipStatus.UNOWNED:
        raise InvariantViolation(f"purchase while property is {prop.status.value}")
    if buyer.has_subsidy:
        raise InvariantViolation(f"{buyer.name}: purchase while a housing allowance is active")
    if not prop.loans.is_clear():
        raise InvariantViolation("purchase while a loan balance is outstanding")

    price = cents(prop.fmv * prop.ground_lease_fraction)
    sizing = size_loans(price, policy, buyer)
    loans = prop.loans
    loans.map.originate(sizing.map, policy.map_overall_rate, policy.map_current_rate)
    loans.dip.originate(sizing.dip)
    loans.rip.originate(sizing.rip)
    loans.zip.originate(sizing.zip)
    loans.sfcu.originate(sizing.sfcu, policy.sfcu_rate, policy.sfcu_term_months)
    buyer.subsidy_budget_remaining -= sizing.zip

    points = cents(sizing.sfcu * policy.sfcu_points)
    closing_payment = price + points + policy.closing_costs - sizing.loan_total
    buyer.balance_posttax -= closing_payment
    year = date_of(day).year
    buyer.tax_ledger.points_paid.add(year, points)
    buyer.deductible_mortgage_limit = mortgage_limit
    buyer.award_subsidy(policy.hap_initial, policy.hap_decrement, hap_periods)

    prop.status = OwnershipStatus.OWNED
    prop.purchase_day = day
    prop.purchase_price = price
    prop.fmv_at_purchase = prop.fmv
    prop.tax_assessment = prop.fmv
    return sizing


def settle_sale(prop: Property, sale_price: Decimal) -> SaleSettlement:
    """Payoff waterfall for a sale at sale_price, without changing any balance."""
    loans = prop.loans
    appreciation = sale_price - prop.purchase_price
    map_interest = ZERO
    if appreciation > 0:
        map_interest = cents(loans.map.sale_interest(prop.purchase_price, appreciation))
    dip_share = cents(loans.dip.sale_share(prop.purchase_price, appreciation))
    settlement = SaleSettlement(
        sale_price=sale_price,
        appreciation=appreciation,
        map_principal=loans.map.principal,
        map_interest=map_interest,
        dip_principal=loans.dip.balance,
        dip_share=dip_share,
        rip=loans.rip.balance,
        zip=loans.zip.balance,
        sfcu=loans.sfcu.balance,
        net_proceeds=ZERO,
    )
    settlement.net_proceeds = sale_price - settlement.total_payoff
    return settlement


def sell_property(
    prop: Property, seller: Person, policy: Policy, day: int,
) -> SaleSettlement:
    """OWNED → SOLD: retire every loan, credit the remainder, cancel the allowance."""
    if prop.status is not OwnershipStatus.OWNED:
        raise InvariantViolation(f"sale while property is {prop.status.value}")
    months = months_between(prop.purchase_day, day)
    if months > prop.loans.sfcu.term_months:
        raise InvariantViolation(
            f"sale after {months} months exceeds the {prop.loans.sfcu.term_months}-month loan term"
        )
    settlement = settle_sale(prop, prop.sale_price(day, policy.known_sale_price))
    if settlement.map_interest:
        seller.tax_ledger.mortgage_interest_paid.add(date_of(day).year, settlement.map_interest)
    prop.loans.retire_all()
    seller.balance_posttax += settlement.net_proceeds
    seller.cancel_subsidy()
    prop.status = OwnershipStatus.SOLD
    return settlement


def home_equity(prop: Property, day: int) -> Decimal:
    """Net proceeds if the home were sold today at the capped price."""
    if not prop.is_owned:
        return ZERO
    return settle_sale(prop, prop.sale_price(day)).net_proceeds


def run_housing_events(
    prop: Property, owner: Person, state: SimulationState, day: int,
) -> None:
    """Daily appreciation, assessment, loan accrual and payments, taxes, upkeep, insurance."""
    policy = state.policy
    prop.appreciate(state.daily_appreciation)
    if not prop.is_owned:
        return

    d = date_of(day)
    ledger = owner.tax_ledger
    loans = prop.loans

    if d.month == ASSESSMENT_MONTH and d.day == 1 and day > prop.purchase_day:
        prop.step_assessment(state.inflation_rate, policy.assessment_cap_rate)

    if day > prop.purchase_day:
        loans.map.accrue_day()
        if d.day in PAY_DAYS and loans.map.principal:
            interest = loans.map.pay_current_interest()
            owner.balance_posttax -= interest
            ledger.mortgage_interest_paid.add(d.year, interest)
    if is_monthly_anniversary(day, prop.purchase_day):
        loans.map.compound()
        interest, principal = loans.sfcu.make_payment()
        owner.balance_posttax -= interest + principal
        ledger.mortgage_interest_paid.add(d.year, interest)

    if (d.month, d.day) in PROPERTY_TAX_DATES:
        installment = cents(prop.tax_assessment * policy.property_tax_rate / 2)
        owner.balance_posttax -= installment
        ledger.property_tax_paid.add(d.year, installment)

    if d.day == 1:
        owner.balance_posttax -= cents(prop.fmv * policy.upkeep_rate / 12)
    if is_yearly_anniversary(day, prop.purchase_day):
        owner.balance_posttax -= cents(prop.fmv * policy.insurance_rate)

    if d.month == ZIP_PAYDOWN_MONTH and d.day == PAY_DAYS[0] and loans.zip.balance:
        purchased = date_of(prop.purchase_day)
        late_origination = (
            purchased.year == d.year
            and (purchased.month, purchased.day) > ZIP_ORIGINATION_CUTOFF
        )
        if not late_origination:
            paydown = loans.zip.pay_down(min(policy.zip_paydown, loans.zip.balance))
            pay_supplemental(owner, d.year, paydown, policy.withholding_rate)

    ledger.record_mortgage_balance(d.year, loans.acquisition_debt())
