"""Shared fixtures."""

from decimal import Decimal

import pytest
from campus_housing_sim.tax import TaxTable, TaxYear


@pytest.fixture
def flat_tax_year():
    """2022 tax year with flat 10% federal / 5% state rates."""
    return TaxYear(
        year=2022,
        federal=TaxTable.from_pairs([(0, 0.10)]),
        state=TaxTable.from_pairs([(0, 0.05)]),
        federal_standard_deduction=Decimal("10000"),
        state_standard_deduction=Decimal("5000"),
        payroll_tax_rate=Decimal("0.062"),
        payroll_wage_base=Decimal("142800"),
        medicare_rate=Decimal("0.0145"),
        medicare_surtax_rate=Decimal("0.0235"),
        medicare_cutoff=Decimal("250000"),
    )
