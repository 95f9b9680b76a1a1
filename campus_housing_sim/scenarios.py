"""Scenario definitions and multi-scenario execution."""

import dataclasses

from campus_housing_sim.params import SimulationParams
from campus_housing_sim.simulation import SimulationResult, simulate

# Long-run overrides; the default 2021-2024 inflation history is kept in every scenario
SCENARIOS = {
    "low growth": {
        "inflation_rate": 0.015,
        "appreciation_rate": 0.02,
        "raise_rate": 0.02,
        "pretax_return": 0.04,
        "posttax_return": 0.02,
    },
    "standard": {
        "inflation_rate": 0.025,
        "appreciation_rate": 0.04,
        "raise_rate": 0.03,
        "pretax_return": 0.06,
        "posttax_return": 0.03,
    },
    "high growth": {
        "inflation_rate": 0.03,
        "appreciation_rate": 0.06,
        "raise_rate": 0.04,
        "pretax_return": 0.075,
        "posttax_return": 0.04,
    },
    "stagflation": {
        "inflation_rate": 0.045,
        "appreciation_rate": 0.01,
        "raise_rate": 0.025,  # real wages -2%/year
        "pretax_return": 0.05,
        "posttax_return": 0.035,
    },
}


def run_scenarios(
    base_params: SimulationParams | None = None,
    scenarios: dict[str, dict] | None = None,
) -> dict[str, SimulationResult]:
    """Run base_params once per scenario with that scenario's rates swapped in."""
    if base_params is None:
        base_params = SimulationParams()
    if scenarios is None:
        scenarios = SCENARIOS
    return {
        name: simulate(dataclasses.replace(base_params, **overrides))
        for name, overrides in scenarios.items()
    }
