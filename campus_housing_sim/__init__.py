"""Campus Housing Wealth Simulation Package."""

from campus_housing_sim.params import SimulationParams, validate_params
from campus_housing_sim.errors import (
    SimulationError,
    InvalidDateError,
    InvalidAmountError,
    InvariantViolation,
)
from campus_housing_sim.dates import to_day, to_date
from campus_housing_sim.simulation import (
    simulate,
    DailyRecord,
    SimulationResult,
)
from campus_housing_sim.real_estate import (
    OwnershipStatus,
    Property,
    LoanSizing,
    SaleSettlement,
    purchase_property,
    sell_property,
)
from campus_housing_sim.scenarios import SCENARIOS, run_scenarios
from campus_housing_sim.tax import TaxTable, TaxReturn, tax_owed, settle_annual_taxes
from campus_housing_sim.amortization import AmortizationSchedule

__all__ = [
    "SimulationParams",
    "validate_params",
    "SimulationError",
    "InvalidDateError",
    "InvalidAmountError",
    "InvariantViolation",
    "to_day",
    "to_date",
    "simulate",
    "DailyRecord",
    "SimulationResult",
    "OwnershipStatus",
    "Property",
    "LoanSizing",
    "SaleSettlement",
    "purchase_property",
    "sell_property",
    "SCENARIOS",
    "run_scenarios",
    "TaxTable",
    "TaxReturn",
    "tax_owed",
    "settle_annual_taxes",
    "AmortizationSchedule",
]
