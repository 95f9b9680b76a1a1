"""Plain-text rendering of simulation results."""

from collections.abc import Iterator
from typing import TextIO

from campus_housing_sim.simulation import DailyRecord, SimulationResult


def format_record(record: DailyRecord) -> str:
    """`date pretax posttax equity net_worth`, amounts in start-date dollars."""
    return (
        f"{record.date} {record.pretax:.2f} {record.posttax:.2f}"
        f" {record.equity:.2f} {record.net_worth:.2f}"
    )


def iter_lines(result: SimulationResult) -> Iterator[str]:
    """One line per simulated day, then the ending line."""
    for record in result.daily:
        yield format_record(record)
    yield format_record(result.ending)


def write_daily_report(result: SimulationResult, stream: TextIO) -> int:
    """Write every line to stream. Returns the number of lines written."""
    count = 0
    for line in iter_lines(result):
        stream.write(line + "\n")
        count += 1
    return count


def format_tax_summary(result: SimulationResult) -> list[str]:
    lines = [
        f"{'year':<6} {'AGI':>12} {'federal':>10} {'state':>10} {'payroll':>10}"
        f" {'medicare':>10} {'withheld':>12} {'due':>11}",
        "-" * 88,
    ]
    for r in result.tax_returns:
        lines.append(
            f"{r.year:<6} {r.agi:>12,.2f} {r.federal_tax:>10,.2f} {r.state_tax:>10,.2f}"
            f" {r.payroll_tax:>10,.2f} {r.medicare_tax:>10,.2f} {r.withholding:>12,.2f}"
            f" {r.balance_due:>11,.2f}"
        )
    return lines


def format_sale_summary(result: SimulationResult) -> list[str]:
    s = result.sale
    if s is None:
        return []
    return [
        f"sale price          {s.sale_price:>14,.2f}",
        f"  appreciation      {s.appreciation:>14,.2f}",
        f"  MAP principal     {-s.map_principal:>14,.2f}",
        f"  MAP shared gain   {-s.map_interest:>14,.2f}",
        f"  DIP principal     {-s.dip_principal:>14,.2f}",
        f"  DIP shared gain   {-s.dip_share:>14,.2f}",
        f"  RIP               {-s.rip:>14,.2f}",
        f"  ZIP               {-s.zip:>14,.2f}",
        f"  SFCU              {-s.sfcu:>14,.2f}",
        f"net proceeds        {s.net_proceeds:>14,.2f}",
    ]
