"""Smoke tests for chart generation."""

import pytest
from campus_housing_sim import SimulationParams, simulate
from campus_housing_sim.charts import plot_tax_history, plot_trajectory


@pytest.fixture(scope="module")
def result():
    return simulate(SimulationParams(end_date="2023-09-01", sale_date="2023-09-01"))


class TestCharts:
    def test_trajectory(self, result, tmp_path):
        path = plot_trajectory({"standard": result, "custom": result}, tmp_path)
        assert path == tmp_path / "trajectory.png"
        assert path.stat().st_size > 0

    def test_trajectory_name_suffix(self, result, tmp_path):
        path = plot_trajectory({"standard": result}, tmp_path / "charts", name="base")
        assert path.name == "trajectory-base.png"
        assert path.exists()

    def test_tax_history(self, result, tmp_path):
        path = plot_tax_history(result, tmp_path)
        assert path.name == "taxes.png"
        assert path.stat().st_size > 0
