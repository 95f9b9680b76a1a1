"""Simulation parameters and their validation."""

from dataclasses import dataclass, field, fields

from campus_housing_sim.dates import to_day
from campus_housing_sim.errors import InvalidAmountError, InvalidDateError
from campus_housing_sim.money import to_decimal
from campus_housing_sim.tax import TaxTable

# 2021 married-filing-jointly brackets (lower threshold, marginal rate)
FEDERAL_BRACKETS_2021: list[tuple[float, float]] = [
    (0, 0.10),
    (19_900, 0.12),
    (81_050, 0.22),
    (172_750, 0.24),
    (329_850, 0.32),
    (418_850, 0.35),
    (628_300, 0.37),
]

# 2021 California joint brackets
STATE_BRACKETS_2021: list[tuple[float, float]] = [
    (0, 0.01),
    (18_650, 0.02),
    (44_214, 0.04),
    (69_784, 0.06),
    (96_870, 0.08),
    (122_428, 0.093),
    (625_372, 0.103),
    (750_442, 0.113),
    (1_250_738, 0.123),
]


@dataclass
class SimulationParams:

    # Horizon (YYYY-MM-DD; purchase/sale None = never)
    start_date: str = "2021-09-01"
    end_date: str = "2051-09-01"
    purchase_date: str | None = "2021-09-01"
    sale_date: str | None = "2051-09-01"
    known_sale_price: float | None = None

    # Economic parameters (annual rates; *_schedule overrides by calendar year)
    inflation_rate: float = 0.025
    inflation_schedule: dict[int, float] = field(
        default_factory=lambda: {2021: 0.047, 2022: 0.080, 2023: 0.041, 2024: 0.029}
    )
    appreciation_rate: float = 0.04
    appreciation_schedule: dict[int, float] = field(default_factory=dict)
    raise_rate: float = 0.03
    raise_schedule: dict[int, float] = field(default_factory=lambda: {2022: 0.05, 2023: 0.04})
    medical_inflation: float = 0.05
    pretax_return: float = 0.06   # retirement accounts
    posttax_return: float = 0.03  # cash and taxable savings, net

    # Buyer (salary is per semi-monthly pay period; other amounts annual)
    buyer_name: str = "buyer"
    buyer_salary: float = 8500.0
    buyer_medical_deduction: float = 4800.0
    buyer_nonhousing_spending: float = 60000.0
    buyer_balance_pretax: float = 0.0
    buyer_balance_posttax: float = 250000.0
    buyer_zip_budget: float = 150000.0  # lifetime ZIP allowance

    # Spouse (salary 0 = single earner, no joint ledger merge)
    spouse_name: str = "spouse"
    spouse_salary: float = 0.0
    spouse_medical_deduction: float = 0.0
    spouse_nonhousing_spending: float = 0.0
    spouse_balance_pretax: float = 0.0
    spouse_balance_posttax: float = 0.0

    # Payroll
    pretax_savings_rate: float = 0.05  # mandatory retirement contribution, share of salary
    withholding_rate: float = 0.30

    # Home
    home_fmv: float = 1900000.0          # full cash value on the start date
    ground_lease_fraction: float = 0.80  # transactable price / full value
    appreciation_cap: float = 1.05       # annual growth factor ceiling at resale
    property_tax_rate: float = 0.0115
    assessment_cap_rate: float = 0.02
    upkeep_rate: float = 0.005
    insurance_rate: float = 0.002
    rent_monthly: float = 0.0            # paid while not owning
    closing_costs: float = 5000.0
    min_down_fraction: float = 0.10

    # Loan policy (share of price, absolute cap)
    map_overall_rate: float = 0.05
    map_current_rate: float = 0.03
    map_price_fraction: float = 0.33
    map_cap: float = 600000.0
    dip_price_fraction: float = 0.05
    dip_cap: float = 100000.0
    rip_price_fraction: float = 0.05
    rip_cap: float = 75000.0
    zip_price_fraction: float = 0.10
    zip_cap: float = 150000.0
    zip_paydown: float = 10000.0
    sfcu_rate: float = 0.03
    sfcu_term_months: int = 360
    sfcu_points: float = 0.005

    # Housing allowance: per-paycheck amount decaying by hap_decrement every N paychecks
    hap_initial: float = 1000.0
    hap_decrement: float = 100.0
    hap_periods_per_step: int = 24
    # (first purchase date, last purchase date, N) windows granting a slower decay
    hap_windows: list[tuple[str, str, int]] = field(
        default_factory=lambda: [("2020-03-15", "2022-06-30", 36)]
    )

    # Tax
    federal_brackets: list[tuple[float, float]] = field(
        default_factory=lambda: list(FEDERAL_BRACKETS_2021)
    )
    state_brackets: list[tuple[float, float]] = field(
        default_factory=lambda: list(STATE_BRACKETS_2021)
    )
    federal_standard_deduction: float = 25100.0
    state_standard_deduction: float = 9606.0
    payroll_tax_rate: float = 0.062
    payroll_wage_base: float = 142800.0
    medicare_rate: float = 0.0145
    medicare_surtax_rate: float = 0.0235
    medicare_cutoff: float = 250000.0
    mortgage_limit_before: float = 1000000.0
    mortgage_limit_after: float = 750000.0
    mortgage_limit_date: str = "2017-12-15"

    def get_inflation_rate(self, year: int) -> float:
        return self.inflation_schedule.get(year, self.inflation_rate)

    def get_appreciation_rate(self, year: int) -> float:
        return self.appreciation_schedule.get(year, self.appreciation_rate)

    def get_raise_rate(self, year: int) -> float:
        return self.raise_schedule.get(year, self.raise_rate)

    def get_hap_periods(self, purchase_day: int) -> int:
        """Paychecks between allowance decrements for a purchase on purchase_day."""
        for first, last, periods in self.hap_windows:
            if to_day(first) <= purchase_day <= to_day(last):
                return periods
        return self.hap_periods_per_step

    def get_mortgage_limit(self, purchase_day: int) -> float:
        if purchase_day < to_day(self.mortgage_limit_date):
            return self.mortgage_limit_before
        return self.mortgage_limit_after

    @property
    def has_spouse(self) -> bool:
        return self.spouse_salary > 0


_FRACTIONS = (
    "ground_lease_fraction", "min_down_fraction", "pretax_savings_rate", "withholding_rate",
    "map_price_fraction", "dip_price_fraction", "rip_price_fraction", "zip_price_fraction",
    "sfcu_points",
)


def _require_number(value, name: str) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidAmountError(f"{name}: expected a number, got {value!r}")
    to_decimal(value, name)


def validate_params(params: SimulationParams) -> None:
    """Reject malformed configuration before the simulation starts.

    Raises InvalidAmountError / InvalidDateError.
    """
    for f in fields(params):
        value = getattr(params, f.name)
        if f.type in (float, int):
            _require_number(value, f.name)
        elif f.name == "known_sale_price" and value is not None:
            _require_number(value, f.name)
            if value <= 0:
                raise InvalidAmountError(f"known_sale_price: must be positive, got {value}")

    for name in ("inflation_schedule", "appreciation_schedule", "raise_schedule"):
        for year, rate in getattr(params, name).items():
            if isinstance(year, bool) or not isinstance(year, int):
                raise InvalidAmountError(f"{name}: year key {year!r} is not an integer")
            _require_number(rate, f"{name}[{year}]")

    TaxTable.from_pairs(params.federal_brackets, "federal_brackets")
    TaxTable.from_pairs(params.state_brackets, "state_brackets")

    for name in _FRACTIONS:
        value = getattr(params, name)
        if not 0 <= value <= 1:
            raise InvalidAmountError(f"{name}: {value} is outside 0..1")
    if params.ground_lease_fraction <= 0:
        raise InvalidAmountError("ground_lease_fraction: must be positive")
    # a 28-day month must accrue at least the two current-interest payments
    if params.map_overall_rate * 28 * 12 < params.map_current_rate * 365:
        raise InvalidAmountError(
            "map_overall_rate: too low to cover map_current_rate payments in a 28-day month"
        )
    for name in ("sfcu_term_months", "hap_periods_per_step"):
        value = getattr(params, name)
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise InvalidAmountError(f"{name}: expected a positive integer, got {value!r}")
    for first, last, periods in params.hap_windows:
        if to_day(first) > to_day(last):
            raise InvalidDateError(f"hap_windows: {first} is after {last}")
        if isinstance(periods, bool) or not isinstance(periods, int) or periods <= 0:
            raise InvalidAmountError(f"hap_windows: expected a positive integer, got {periods!r}")

    start = to_day(params.start_date)
    end = to_day(params.end_date)
    to_day(params.mortgage_limit_date)
    if end < start:
        raise InvalidDateError(f"end_date {params.end_date} is before start_date {params.start_date}")
    purchase = None
    if params.purchase_date is not None:
        purchase = to_day(params.purchase_date)
        if not start <= purchase <= end:
            raise InvalidDateError(f"purchase_date {params.purchase_date} is outside the horizon")
    if params.sale_date is not None:
        sale = to_day(params.sale_date)
        if purchase is None:
            raise InvalidDateError("sale_date given without a purchase_date")
        if not purchase < sale <= end:
            raise InvalidDateError(f"sale_date {params.sale_date} must fall after purchase and within the horizon")
