"""Tests for SimulationParams helpers and validation."""

import pytest
from campus_housing_sim import SimulationParams
from campus_housing_sim.dates import to_day
from campus_housing_sim.errors import InvalidAmountError, InvalidDateError
from campus_housing_sim.params import validate_params


class TestScheduledRates:
    def setup_method(self):
        self.params = SimulationParams()

    def test_inflation_history_then_long_run(self):
        assert self.params.get_inflation_rate(2022) == 0.080
        assert self.params.get_inflation_rate(2030) == 0.025

    def test_raise_schedule(self):
        assert self.params.get_raise_rate(2022) == 0.05
        assert self.params.get_raise_rate(2040) == 0.03

    def test_appreciation_default(self):
        assert self.params.get_appreciation_rate(2021) == 0.04


class TestHousingAllowancePeriods:
    def test_inside_window(self):
        assert SimulationParams().get_hap_periods(to_day("2021-09-01")) == 36

    def test_window_boundaries_inclusive(self):
        p = SimulationParams()
        assert p.get_hap_periods(to_day("2020-03-15")) == 36
        assert p.get_hap_periods(to_day("2022-06-30")) == 36

    def test_outside_window(self):
        assert SimulationParams().get_hap_periods(to_day("2022-07-01")) == 24


class TestMortgageLimit:
    def test_grandfathered(self):
        assert SimulationParams().get_mortgage_limit(to_day("2017-12-14")) == 1000000.0

    def test_current(self):
        assert SimulationParams().get_mortgage_limit(to_day("2017-12-15")) == 750000.0


class TestHasSpouse:
    def test_default_single(self):
        assert not SimulationParams().has_spouse

    def test_spouse_salary(self):
        assert SimulationParams(spouse_salary=4000).has_spouse


class TestValidateParams:
    def test_defaults_valid(self):
        validate_params(SimulationParams())

    def test_no_purchase(self):
        validate_params(SimulationParams(purchase_date=None, sale_date=None))

    @pytest.mark.parametrize("field,value", [
        ("buyer_salary", "8500"),
        ("buyer_salary", None),
        ("inflation_rate", True),
        ("home_fmv", float("nan")),
        ("home_fmv", float("inf")),
    ])
    def test_non_numeric(self, field, value):
        with pytest.raises(InvalidAmountError):
            validate_params(SimulationParams(**{field: value}))

    def test_fraction_out_of_range(self):
        with pytest.raises(InvalidAmountError):
            validate_params(SimulationParams(ground_lease_fraction=1.5))

    def test_map_rates_inverted(self):
        with pytest.raises(InvalidAmountError):
            validate_params(SimulationParams(map_overall_rate=0.02, map_current_rate=0.03))

    @pytest.mark.parametrize("overall,current", [(0.04, 0.04), (0.05, 0.047)])
    def test_map_accrual_short_of_february(self, overall, current):
        with pytest.raises(InvalidAmountError):
            validate_params(SimulationParams(map_overall_rate=overall, map_current_rate=current))

    def test_map_accrual_covers_february(self):
        validate_params(SimulationParams(map_overall_rate=0.05, map_current_rate=0.046))

    def test_schedule_year_key(self):
        with pytest.raises(InvalidAmountError):
            validate_params(SimulationParams(inflation_schedule={"2022": 0.08}))

    def test_bad_brackets(self):
        with pytest.raises(InvalidAmountError):
            validate_params(SimulationParams(federal_brackets=[(0, 0.1), (0, 0.2)]))

    def test_term_not_integer(self):
        with pytest.raises(InvalidAmountError):
            validate_params(SimulationParams(sfcu_term_months=360.0))

    def test_known_sale_price_positive(self):
        with pytest.raises(InvalidAmountError):
            validate_params(SimulationParams(known_sale_price=-1.0))

    def test_malformed_date(self):
        with pytest.raises(InvalidDateError):
            validate_params(SimulationParams(start_date="09/01/2021"))

    def test_end_before_start(self):
        with pytest.raises(InvalidDateError):
            validate_params(SimulationParams(end_date="2020-01-01", purchase_date=None, sale_date=None))

    def test_purchase_outside_horizon(self):
        with pytest.raises(InvalidDateError):
            validate_params(SimulationParams(purchase_date="2060-01-01"))

    def test_sale_before_purchase(self):
        with pytest.raises(InvalidDateError):
            validate_params(SimulationParams(purchase_date="2022-01-01", sale_date="2021-12-01"))

    def test_sale_without_purchase(self):
        with pytest.raises(InvalidDateError):
            validate_params(SimulationParams(purchase_date=None))

    def test_hap_window_reversed(self):
        with pytest.raises(InvalidDateError):
            validate_params(SimulationParams(hap_windows=[("2022-06-30", "2020-03-15", 36)]))
