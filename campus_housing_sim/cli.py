"""CLI entry point for a single simulation run."""

import argparse
import sys
from pathlib import Path

from campus_housing_sim.config import parse_args
from campus_housing_sim.errors import SimulationError
from campus_housing_sim.params import SimulationParams
from campus_housing_sim.report import format_sale_summary, format_tax_summary, write_daily_report
from campus_housing_sim.simulation import SimulationResult, simulate


def _add_args(parser: argparse.ArgumentParser):
    parser.add_argument(
        "--output", type=Path, default=None,
        help="write the daily lines to this file instead of stdout",
    )
    parser.add_argument(
        "--chart-dir", type=Path, default=None,
        help="also render trajectory and tax charts into this directory",
    )
    parser.add_argument(
        "--summary", action="store_true",
        help="print the annual tax and sale summaries to stderr",
    )


def _print_header(params: SimulationParams):
    err = sys.stderr
    print("=" * 80, file=err)
    print(f"Campus housing simulation {params.start_date} .. {params.end_date}", file=err)
    spouse = f" + spouse {params.spouse_salary:,.0f}" if params.has_spouse else ""
    print(f"  salary per period: {params.buyer_salary:,.0f}{spouse}", file=err)
    if params.purchase_date:
        sale = params.sale_date or "never"
        print(f"  home FMV {params.home_fmv:,.0f}, purchase {params.purchase_date}, sale {sale}", file=err)
    else:
        print("  renting throughout", file=err)
    print("=" * 80, file=err)


def _print_summary(result: SimulationResult):
    err = sys.stderr
    if result.purchase is not None:
        p = result.purchase
        print(f"\npurchase price {p.price:,.2f}, loans {p.loan_total:,.2f}, down payment {p.down_payment:,.2f}", file=err)
    print("\n[annual taxes]", file=err)
    for line in format_tax_summary(result):
        print(line, file=err)
    sale_lines = format_sale_summary(result)
    if sale_lines:
        print("\n[sale]", file=err)
        for line in sale_lines:
            print(line, file=err)


def main():
    try:
        params, args = parse_args("Campus housing wealth simulation", _add_args)
        _print_header(params)
        result = simulate(params)
    except SimulationError as e:
        print(f"error: {e}", file=sys.stderr)
        raise SystemExit(1)

    if args.output is not None:
        with open(args.output, "w") as f:
            count = write_daily_report(result, f)
        print(f"wrote {count} lines to {args.output}", file=sys.stderr)
    else:
        write_daily_report(result, sys.stdout)

    if args.summary:
        _print_summary(result)

    if args.chart_dir is not None:
        from campus_housing_sim.charts import plot_tax_history, plot_trajectory

        path = plot_trajectory({"standard": result}, args.chart_dir)
        print(f"  -> {path}", file=sys.stderr)
        path = plot_tax_history(result, args.chart_dir)
        print(f"  -> {path}", file=sys.stderr)

    for warning in result.warnings:
        print(f"warning: {warning}", file=sys.stderr)


if __name__ == "__main__":
    main()
