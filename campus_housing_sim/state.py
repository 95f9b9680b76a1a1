"""Simulation-wide state: current-year rates, indexed tax parameters, price index.

The driver owns exactly one SimulationState. The only yearly mutation is
apply_annual_indexing(), run on January 1 of every year after the first.
"""

from dataclasses import dataclass, field, fields
from decimal import Decimal

from campus_housing_sim.money import ONE, daily_factor, to_decimal
from campus_housing_sim.params import SimulationParams
from campus_housing_sim.tax import TaxTable, TaxYear, inflate


@dataclass(frozen=True)
class Policy:
    """Decimal copies of the fixed (never indexed) money and rate parameters."""

    pretax_savings_rate: Decimal
    withholding_rate: Decimal
    medical_inflation: Decimal
    ground_lease_fraction: Decimal
    appreciation_cap: Decimal
    property_tax_rate: Decimal
    assessment_cap_rate: Decimal
    upkeep_rate: Decimal
    insurance_rate: Decimal
    rent_monthly: Decimal
    closing_costs: Decimal
    min_down_fraction: Decimal
    map_overall_rate: Decimal
    map_current_rate: Decimal
    map_price_fraction: Decimal
    map_cap: Decimal
    dip_price_fraction: Decimal
    dip_cap: Decimal
    rip_price_fraction: Decimal
    rip_cap: Decimal
    zip_price_fraction: Decimal
    zip_cap: Decimal
    zip_paydown: Decimal
    sfcu_rate: Decimal
    sfcu_points: Decimal
    hap_initial: Decimal
    hap_decrement: Decimal
    sfcu_term_months: int
    known_sale_price: Decimal | None

    @classmethod
    def from_params(cls, params: SimulationParams) -> "Policy":
        values = {}
        for f in fields(cls):
            raw = getattr(params, f.name)
            if f.type is Decimal or (raw is not None and f.name == "known_sale_price"):
                values[f.name] = to_decimal(raw, f.name)
            else:
                values[f.name] = raw
        return cls(**values)


@dataclass
class SimulationState:
    year: int
    policy: Policy
    federal: TaxTable
    state: TaxTable
    federal_standard_deduction: Decimal
    state_standard_deduction: Decimal
    payroll_tax_rate: Decimal
    payroll_wage_base: Decimal
    medicare_rate: Decimal
    medicare_surtax_rate: Decimal
    medicare_cutoff: Decimal
    inflation_rate: Decimal = Decimal(0)
    appreciation_rate: Decimal = Decimal(0)
    raise_rate: Decimal = Decimal(0)
    daily_inflation: Decimal = ONE
    daily_appreciation: Decimal = ONE
    daily_pretax_growth: Decimal = ONE
    daily_posttax_growth: Decimal = ONE
    cpi: Decimal = ONE  # price level relative to the start date
    indexing_factor: Decimal = ONE  # factor applied at the last January 1 indexing
    tax_years: dict[int, TaxYear] = field(default_factory=dict)
    settled_through: int | None = None

    @classmethod
    def from_params(cls, params: SimulationParams, start_year: int) -> "SimulationState":
        state = cls(
            year=start_year,
            policy=Policy.from_params(params),
            federal=TaxTable.from_pairs(params.federal_brackets, "federal_brackets"),
            state=TaxTable.from_pairs(params.state_brackets, "state_brackets"),
            federal_standard_deduction=to_decimal(params.federal_standard_deduction),
            state_standard_deduction=to_decimal(params.state_standard_deduction),
            payroll_tax_rate=to_decimal(params.payroll_tax_rate),
            payroll_wage_base=to_decimal(params.payroll_wage_base),
            medicare_rate=to_decimal(params.medicare_rate),
            medicare_surtax_rate=to_decimal(params.medicare_surtax_rate),
            medicare_cutoff=to_decimal(params.medicare_cutoff),
            daily_pretax_growth=daily_factor(to_decimal(params.pretax_return)),
            daily_posttax_growth=daily_factor(to_decimal(params.posttax_return)),
        )
        _load_year_rates(state, params, start_year)
        return state

    def snapshot_tax_year(self) -> TaxYear:
        return TaxYear(
            year=self.year,
            federal=self.federal.copy(),
            state=self.state.copy(),
            federal_standard_deduction=self.federal_standard_deduction,
            state_standard_deduction=self.state_standard_deduction,
            payroll_tax_rate=self.payroll_tax_rate,
            payroll_wage_base=self.payroll_wage_base,
            medicare_rate=self.medicare_rate,
            medicare_surtax_rate=self.medicare_surtax_rate,
            medicare_cutoff=self.medicare_cutoff,
        )

    def tax_year(self, year: int) -> TaxYear | None:
        return self.tax_years.get(year)


def _load_year_rates(state: SimulationState, params: SimulationParams, year: int) -> None:
    state.year = year
    state.inflation_rate = to_decimal(params.get_inflation_rate(year))
    state.appreciation_rate = to_decimal(params.get_appreciation_rate(year))
    state.raise_rate = to_decimal(params.get_raise_rate(year))
    state.daily_inflation = daily_factor(state.inflation_rate)
    state.daily_appreciation = daily_factor(state.appreciation_rate)
    state.tax_years[year] = state.snapshot_tax_year()


def apply_annual_indexing(state: SimulationState, params: SimulationParams, year: int) -> None:
    """Index tax parameters by last year's inflation and load `year`'s rates.

    Bracket thresholds, standard deductions and the payroll wage base scale
    by (1 + inflation of the year just ended). The SALT cap and the two-tier
    cutoff are statutory and stay fixed.
    """
    factor = ONE + state.inflation_rate
    state.indexing_factor = factor
    inflate(state.federal, factor)
    inflate(state.state, factor)
    state.federal_standard_deduction *= factor
    state.state_standard_deduction *= factor
    state.payroll_wage_base *= factor
    _load_year_rates(state, params, year)
