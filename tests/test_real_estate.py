"""Tests for the property lifecycle: purchase, housing events, sale."""

from decimal import Decimal

import pytest
from campus_housing_sim.dates import to_day
from campus_housing_sim.errors import InvariantViolation
from campus_housing_sim.money import cents
from campus_housing_sim.params import SimulationParams
from campus_housing_sim.person import Person
from campus_housing_sim.real_estate import (
    OwnershipStatus,
    Property,
    home_equity,
    purchase_property,
    run_housing_events,
    sell_property,
    settle_sale,
    size_loans,
)
from campus_housing_sim.state import Policy, SimulationState

D = Decimal
PURCHASE = to_day("2021-09-01")


def _buyer() -> Person:
    return Person(
        name="buyer",
        salary=D(8500),
        balance_posttax=D(250000),
        subsidy_budget_remaining=D(150000),
    )


def _home() -> Property:
    return Property(fmv=D(1900000), ground_lease_fraction=D("0.8"), appreciation_cap=D("1.05"))


def _bought(day: int = PURCHASE):
    home, buyer = _home(), _buyer()
    policy = Policy.from_params(SimulationParams())
    sizing = purchase_property(home, buyer, policy, day, mortgage_limit=D(750000), hap_periods=36)
    return home, buyer, policy, sizing


class TestSizeLoans:
    def test_default_stack(self):
        """1.52M price: 10% down, MAP 33%, DIP 5%, RIP capped 75k, ZIP capped 150k, SFCU rest"""
        sizing = size_loans(D("1520000.00"), Policy.from_params(SimulationParams()), _buyer())
        assert sizing.down_payment == D("152000.00")
        assert sizing.map == D("501600.00")
        assert sizing.dip == D("76000.00")
        assert sizing.rip == D(75000)
        assert sizing.zip == D(150000)
        assert sizing.sfcu == D("565400.00")
        assert sizing.loan_total == sizing.price - sizing.down_payment

    def test_zip_limited_by_remaining_budget(self):
        buyer = _buyer()
        buyer.subsidy_budget_remaining = D(40000)
        sizing = size_loans(D("1520000.00"), Policy.from_params(SimulationParams()), buyer)
        assert sizing.zip == D(40000)
        assert sizing.sfcu == D("675400.00")


class TestPurchase:
    def test_closing_cash_and_state(self):
        home, buyer, _, sizing = _bought()
        # down payment + points on SFCU + closing costs
        assert buyer.balance_posttax == D(250000) - D(152000) - D("2827.00") - D(5000)
        assert buyer.tax_ledger.points_paid.get(2021) == D("2827.00")
        assert buyer.subsidy_budget_remaining == 0
        assert buyer.deductible_mortgage_limit == D(750000)
        assert buyer.has_subsidy
        assert home.status is OwnershipStatus.OWNED
        assert home.purchase_price == D("1520000.00")
        assert home.tax_assessment == D(1900000)
        assert home.loans.acquisition_debt() == sizing.loan_total

    def test_repurchase_rejected(self):
        home, buyer, policy, _ = _bought()
        with pytest.raises(InvariantViolation):
            purchase_property(home, buyer, policy, PURCHASE + 1, D(750000), 36)

    def test_active_allowance_rejected(self):
        home, buyer = _home(), _buyer()
        buyer.award_subsidy(D(1000), D(100), 24)
        with pytest.raises(InvariantViolation):
            purchase_property(home, buyer, Policy.from_params(SimulationParams()), PURCHASE, D(750000), 36)

    def test_outstanding_loan_rejected(self):
        home, buyer = _home(), _buyer()
        home.loans.rip.originate(D(1000))
        with pytest.raises(InvariantViolation):
            purchase_property(home, buyer, Policy.from_params(SimulationParams()), PURCHASE, D(750000), 36)
        assert home.status is OwnershipStatus.UNOWNED
        assert buyer.balance_posttax == D(250000)


class TestSalePrice:
    def test_capped_by_appreciation_ceiling(self):
        home, _, _, _ = _bought()
        home.fmv = D(3000000)
        day = PURCHASE + 365
        assert home.sale_price(day) == cents(home.capped_value(day) * D("0.8"))
        assert home.sale_price(day) < D(3000000) * D("0.8")

    def test_fmv_below_ceiling(self):
        home, _, _, _ = _bought()
        assert home.sale_price(PURCHASE + 365) == D("1520000.00")

    def test_known_price_below_capped(self):
        home, _, _, _ = _bought()
        with pytest.raises(InvariantViolation):
            home.sale_price(PURCHASE + 365, D(1000000))

    def test_known_price_accepted(self):
        home, _, _, _ = _bought()
        assert home.sale_price(PURCHASE + 365, D(1600000)) == D(1600000)


class TestSaleWaterfall:
    def test_no_appreciation(self):
        home, _, _, sizing = _bought()
        home.loans.map.cumulative_deferred_interest = D(50000)
        s = settle_sale(home, sizing.price)
        assert s.map_interest == 0
        assert s.dip_share == 0
        assert s.net_proceeds == sizing.down_payment

    def test_map_share_capped_at_deferred_interest(self):
        home, _, _, _ = _bought()
        home.loans.map.cumulative_deferred_interest = D(50000)
        s = settle_sale(home, D(1672000))
        assert s.appreciation == D(152000)
        assert s.map_interest == D(50000)  # share would be 50,160
        assert s.dip_share == D(7600)
        assert s.net_proceeds == D(1672000) - D(1425600)

    def test_map_share_below_deferred_interest(self):
        home, _, _, _ = _bought()
        home.loans.map.cumulative_deferred_interest = D(100000)
        s = settle_sale(home, D(1672000))
        assert s.map_interest == D("50160.00")

    def test_settle_does_not_mutate(self):
        home, _, _, sizing = _bought()
        settle_sale(home, D(1672000))
        assert home.loans.acquisition_debt() == sizing.loan_total


class TestSell:
    def test_sale_retires_loans_and_credits_proceeds(self):
        home, buyer, policy, sizing = _bought()
        before = buyer.balance_posttax
        s = sell_property(home, buyer, policy, PURCHASE + 365)
        assert buyer.balance_posttax == before + s.net_proceeds
        assert home.loans.is_clear()
        assert home.status is OwnershipStatus.SOLD
        assert not buyer.has_subsidy
        assert home_equity(home, PURCHASE + 366) == 0

    def test_sale_records_map_share_as_interest(self):
        home, buyer, policy, _ = _bought()
        home.loans.map.cumulative_deferred_interest = D(50000)
        home.fmv = D(2090000)  # 1,672,000 transactable
        sell_property(home, buyer, policy, to_day("2024-09-01"))
        assert buyer.tax_ledger.mortgage_interest_paid.get(2024) == D(50000)

    def test_sale_after_term(self):
        home, buyer, policy, _ = _bought()
        with pytest.raises(InvariantViolation):
            sell_property(home, buyer, policy, to_day("2051-10-01"))

    def test_sale_when_not_owned(self):
        home, buyer = _home(), _buyer()
        with pytest.raises(InvariantViolation):
            sell_property(home, buyer, Policy.from_params(SimulationParams()), PURCHASE)

    def test_sold_value_frozen(self):
        home, buyer, policy, _ = _bought()
        sell_property(home, buyer, policy, PURCHASE + 30)
        fmv = home.fmv
        home.appreciate(D("1.001"))
        assert home.fmv == fmv


class TestHousingEvents:
    def setup_method(self):
        self.state = SimulationState.from_params(SimulationParams(), 2021)

    def test_property_tax_installment(self):
        home, buyer, _, _ = _bought()
        run_housing_events(home, buyer, self.state, to_day("2021-12-10"))
        assert buyer.tax_ledger.property_tax_paid.get(2021) == D("10925.00")

    def test_zip_paydown_skipped_after_cutoff(self):
        home, buyer, _, _ = _bought()
        run_housing_events(home, buyer, self.state, to_day("2021-12-07"))
        assert home.loans.zip.balance == D(150000)
        run_housing_events(home, buyer, self.state, to_day("2022-12-07"))
        assert home.loans.zip.balance == D(140000)
        ledger = buyer.tax_ledger
        assert ledger.gross_payroll.get(2022) == D(10000)
        assert ledger.escrowed_withholding.get(2022) == D("3000.00")

    def test_zip_paydown_when_bought_early_in_year(self):
        home, buyer, _, _ = _bought(to_day("2022-03-01"))
        run_housing_events(home, buyer, self.state, to_day("2022-12-07"))
        assert home.loans.zip.balance == D(140000)

    def test_current_interest_on_pay_day(self):
        home, buyer, _, _ = _bought()
        before = buyer.balance_posttax
        run_housing_events(home, buyer, self.state, to_day("2021-09-07"))
        due = D("627.00")  # 501,600 × 3% / 24
        assert buyer.balance_posttax == before - due
        assert buyer.tax_ledger.mortgage_interest_paid.get(2021) == due

    def test_monthly_anniversary_pays_sfcu(self):
        home, buyer, _, _ = _bought()
        run_housing_events(home, buyer, self.state, to_day("2021-10-01"))
        assert home.loans.sfcu.payments_made == 1
        assert home.loans.sfcu.balance < D("565400.00")

    def test_assessment_step_capped(self):
        home, buyer, _, _ = _bought()
        run_housing_events(home, buyer, self.state, to_day("2022-07-01"))
        assert home.tax_assessment == D(1900000) * D("1.02")

    def test_records_acquisition_debt(self):
        home, buyer, _, sizing = _bought()
        day = to_day("2021-09-02")
        run_housing_events(home, buyer, self.state, day)
        assert buyer.tax_ledger.average_mortgage_balance(2021) == sizing.loan_total

    def test_not_owned_only_appreciates(self):
        home, buyer = _home(), _buyer()
        run_housing_events(home, buyer, self.state, to_day("2021-12-10"))
        assert home.fmv > D(1900000)
        assert buyer.balance_posttax == D(250000)
