"""Chart generation for simulation results."""

from datetime import date
from pathlib import Path

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import matplotlib.ticker as ticker

from campus_housing_sim.simulation import SimulationResult

# Scenario color mapping
SCENARIO_COLORS = {
    "low growth": "#d62728",    # red
    "standard": "#1f77b4",      # blue
    "high growth": "#2ca02c",   # green
    "stagflation": "#ff7f0e",   # orange
}

DEFAULT_COLOR = "#7f7f7f"


def _format_dollar_axis(ax: plt.Axes):
    """Thousands separators on the left axis, $M labels on the right."""
    ax.yaxis.set_major_formatter(
        ticker.FuncFormatter(lambda x, _: f"{x:,.0f}")
    )
    ax_right = ax.secondary_yaxis("right")
    ax_right.yaxis.set_major_formatter(
        ticker.FuncFormatter(lambda x, _: f"${x / 1e6:.1f}M" if x != 0 else "0")
    )
    ax_right.set_ylabel("")


def _output_file(output_path: Path, stem: str, name: str) -> Path:
    output_path.mkdir(parents=True, exist_ok=True)
    suffix = f"-{name}" if name else ""
    return output_path / f"{stem}{suffix}.png"


def plot_trajectory(
    results: dict[str, SimulationResult], output_path: Path, name: str = "",
) -> Path:
    """Line chart of real net worth (and its liquid part) for each result.

    Args:
        results: label → SimulationResult (a single run or one per scenario).
        output_path: directory to save the PNG.
        name: optional filename suffix (e.g. "base" → "trajectory-base.png").

    Returns:
        Path to the generated PNG file.
    """
    fig, ax = plt.subplots(figsize=(14, 8))

    for label, result in results.items():
        records = result.yearly_records()
        dates = [date.fromisoformat(r.date) for r in records]
        color = SCENARIO_COLORS.get(label, DEFAULT_COLOR)
        ax.plot(dates, [float(r.net_worth) for r in records], label=f"{label} net worth",
                color=color, linewidth=2)
        ax.plot(dates, [float(r.pretax + r.posttax) for r in records], label=f"{label} liquid",
                color=color, linewidth=1, linestyle="--", alpha=0.7)

    ax.set_xlabel("Year")
    ax.set_ylabel("Net worth (start-date dollars)")
    ax.set_title("Inflation-adjusted net worth")
    ax.legend(loc="upper left")
    ax.grid(True, alpha=0.3)
    _format_dollar_axis(ax)

    filepath = _output_file(output_path, "trajectory", name)
    fig.tight_layout()
    fig.savefig(filepath, dpi=150)
    plt.close(fig)
    return filepath


def plot_tax_history(result: SimulationResult, output_path: Path, name: str = "") -> Path:
    """Stacked bars of annual tax components against the escrowed withholding."""
    returns = result.tax_returns
    years = [r.year for r in returns]
    federal = [float(r.federal_tax) for r in returns]
    state = [float(r.state_tax) for r in returns]
    payroll = [float(r.payroll_tax + r.medicare_tax) for r in returns]
    withheld = [float(r.withholding) for r in returns]

    fig, ax = plt.subplots(figsize=(14, 6))
    ax.bar(years, federal, label="federal", color="#1f77b4")
    ax.bar(years, state, bottom=federal, label="state", color="#2ca02c")
    bottoms = [f + s for f, s in zip(federal, state)]
    ax.bar(years, payroll, bottom=bottoms, label="payroll", color="#9467bd")
    ax.plot(years, withheld, label="withheld", color="#d62728", marker="o", linewidth=1.5)

    ax.set_xlabel("Tax year")
    ax.set_ylabel("Nominal dollars")
    ax.set_title("Annual tax vs. withholding")
    ax.legend(loc="upper left")
    ax.grid(True, axis="y", alpha=0.3)
    _format_dollar_axis(ax)

    filepath = _output_file(output_path, "taxes", name)
    fig.tight_layout()
    fig.savefig(filepath, dpi=150)
    plt.close(fig)
    return filepath
