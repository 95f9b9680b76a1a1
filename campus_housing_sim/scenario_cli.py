"""CLI entry point for scenario comparison."""

import argparse
import sys
from pathlib import Path

from campus_housing_sim.config import parse_args
from campus_housing_sim.errors import SimulationError
from campus_housing_sim.scenarios import SCENARIOS, run_scenarios
from campus_housing_sim.simulation import SimulationResult

SCENARIO_ORDER = ["low growth", "standard", "high growth", "stagflation"]


def print_parameters():
    """Print scenario parameters"""
    print("=" * 90)
    print("Scenario comparison")
    print("=" * 90)
    print(
        f"{'scenario':<14} {'inflation':>10} {'home':>10} {'raises':>10}"
        f" {'pretax':>10} {'posttax':>10}"
    )
    print("-" * 90)
    for name in SCENARIO_ORDER:
        s = SCENARIOS[name]
        print(
            f"{name:<14} {s['inflation_rate'] * 100:>9.1f}% {s['appreciation_rate'] * 100:>9.1f}%"
            f" {s['raise_rate'] * 100:>9.1f}% {s['pretax_return'] * 100:>9.1f}%"
            f" {s['posttax_return'] * 100:>9.1f}%"
        )
    print("-" * 90)
    print()


def print_results(results: dict[str, SimulationResult]):
    """Final balances per scenario, in start-date dollars"""
    print(
        f"{'scenario':<14} {'pretax':>14} {'posttax':>14} {'equity':>14} {'net worth':>14}"
    )
    print("-" * 90)
    for name in SCENARIO_ORDER:
        final = results[name].final
        print(
            f"{name:<14} {final.pretax:>14,.0f} {final.posttax:>14,.0f}"
            f" {final.equity:>14,.0f} {final.net_worth:>14,.0f}"
        )
    print("-" * 90)
    for name in SCENARIO_ORDER:
        for warning in results[name].warnings:
            print(f"warning ({name}): {warning}", file=sys.stderr)


def _add_args(parser: argparse.ArgumentParser):
    parser.add_argument(
        "--chart-dir", type=Path, default=None,
        help="render the scenario trajectory chart into this directory",
    )
    parser.add_argument(
        "--name", type=str, default="",
        help="chart filename suffix (e.g. base -> trajectory-base.png)",
    )


def main():
    try:
        params, args = parse_args("Campus housing scenario comparison", _add_args)
        print_parameters()
        results = run_scenarios(params)
    except SimulationError as e:
        print(f"error: {e}", file=sys.stderr)
        raise SystemExit(1)
    print_results(results)

    if args.chart_dir is not None:
        from campus_housing_sim.charts import plot_trajectory

        path = plot_trajectory(results, args.chart_dir, name=args.name)
        print(f"  -> {path}")


if __name__ == "__main__":
    main()
