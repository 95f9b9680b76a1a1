"""TOML config loader with CLI > config > default resolution."""

import argparse
import dataclasses
import sys
import tomllib
from datetime import date
from pathlib import Path
from typing import Callable

from campus_housing_sim.errors import InvalidAmountError
from campus_housing_sim.params import SimulationParams, validate_params

DEFAULT_CONFIG_PATH = Path("config.toml")

# CLI-overridable keys → SimulationParams field
CLI_FIELDS = {
    "start_date": "start_date",
    "end_date": "end_date",
    "purchase_date": "purchase_date",
    "sale_date": "sale_date",
    "sale_price": "known_sale_price",
    "balance_pretax": "buyer_balance_pretax",
    "balance_posttax": "buyer_balance_posttax",
    "salary": "buyer_salary",
    "spouse_salary": "spouse_salary",
    "home_fmv": "home_fmv",
    "inflation": "inflation_rate",
    "appreciation": "appreciation_rate",
}

_BASE = SimulationParams()
DEFAULTS = {key: getattr(_BASE, name) for key, name in CLI_FIELDS.items()}

_PARAM_FIELDS = {f.name for f in dataclasses.fields(SimulationParams)}
_CLI_PARAMS = set(CLI_FIELDS.values())
_SCHEDULES = ("inflation_schedule", "appreciation_schedule", "raise_schedule")
_OPTIONAL_KEYS = ("purchase_date", "sale_date", "sale_price")
_DATE_KEYS = ("start_date", "end_date", "purchase_date", "sale_date", "mortgage_limit_date")


def _none_if_disabled(value):
    """TOML has no null: false or "none" switch an optional value off."""
    if value is False or (isinstance(value, str) and value.strip().lower() == "none"):
        return None
    return value


def _iso(value):
    """Unquoted TOML dates load as datetime.date; the engine takes YYYY-MM-DD strings."""
    return value.isoformat() if isinstance(value, date) else value


def load_config(path: Path | None = None) -> dict:
    """Load TOML config file. Returns empty dict if file doesn't exist."""
    if path is None:
        path = DEFAULT_CONFIG_PATH
    if not path.exists():
        return {}
    try:
        with open(path, "rb") as f:
            raw = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        print(f"failed to read config file {path}: {e}", file=sys.stderr)
        raise SystemExit(1)
    for key in _OPTIONAL_KEYS:
        if key in raw:
            raw[key] = _none_if_disabled(raw[key])
    for key in _DATE_KEYS:
        if key in raw:
            raw[key] = _iso(raw[key])
    # TOML table keys are strings: [inflation_schedule] "2022" = 0.08
    for key in _SCHEDULES:
        if key in raw:
            schedule = {}
            for year, rate in raw[key].items():
                try:
                    schedule[int(year)] = rate
                except ValueError:
                    raise InvalidAmountError(f"{key}: year key {year!r} is not an integer") from None
            raw[key] = schedule
    if "hap_windows" in raw:
        raw["hap_windows"] = [tuple(_iso(v) for v in window) for window in raw["hap_windows"]]
    for key in ("federal_brackets", "state_brackets"):
        if key in raw:
            raw[key] = [tuple(pair) if isinstance(pair, list) else pair for pair in raw[key]]
    return raw


def create_parser(description: str) -> argparse.ArgumentParser:
    """Create argparse parser with shared simulation flags."""
    d = DEFAULTS
    parser = argparse.ArgumentParser(description=description)
    parser.add_argument("--config", type=Path, default=None, help="config file path (default: config.toml)")
    parser.add_argument("--start-date", type=str, default=None, help=f"first simulated day (default: {d['start_date']})")
    parser.add_argument("--end-date", type=str, default=None, help=f"last simulated day (default: {d['end_date']})")
    parser.add_argument("--purchase-date", type=str, default=None, help=f"home purchase date, 'none' to rent throughout (default: {d['purchase_date']})")
    parser.add_argument("--sale-date", type=str, default=None, help=f"home sale date, 'none' to hold (default: {d['sale_date']})")
    parser.add_argument("--sale-price", type=float, default=None, help="known sale price (default: capped fair market value)")
    parser.add_argument("--balance-pretax", type=float, default=None, help=f"starting retirement balance (default: {d['balance_pretax']:,.0f})")
    parser.add_argument("--balance-posttax", type=float, default=None, help=f"starting cash balance (default: {d['balance_posttax']:,.0f})")
    parser.add_argument("--salary", type=float, default=None, help=f"buyer salary per pay period (default: {d['salary']:,.0f})")
    parser.add_argument("--spouse-salary", type=float, default=None, help=f"spouse salary per pay period, 0 = no spouse (default: {d['spouse_salary']:,.0f})")
    parser.add_argument("--home-fmv", type=float, default=None, help=f"home fair market value on the start date (default: {d['home_fmv']:,.0f})")
    parser.add_argument("--inflation", type=float, default=None, help=f"long-run annual inflation (default: {d['inflation']})")
    parser.add_argument("--appreciation", type=float, default=None, help=f"annual home appreciation (default: {d['appreciation']})")
    return parser


def resolve(args: argparse.Namespace, config: dict) -> dict:
    """Resolve values with priority: CLI flag > config.toml > hardcoded default."""
    resolved = {}
    for key, default in DEFAULTS.items():
        cli_val = getattr(args, key, None)
        if cli_val is not None and key in _OPTIONAL_KEYS:
            cli_val = _none_if_disabled(cli_val)
            resolved[key] = cli_val
            continue
        if cli_val is not None:
            resolved[key] = cli_val
        elif key in config:
            resolved[key] = config[key]
        else:
            # the file may spell the key by its field name (sale_price -> known_sale_price)
            resolved[key] = config.get(CLI_FIELDS[key], default)
            if key in _OPTIONAL_KEYS:
                resolved[key] = _none_if_disabled(resolved[key])
    return resolved


def build_params(r: dict, config: dict | None = None) -> SimulationParams:
    """Build and validate SimulationParams from resolved values plus advanced config keys.

    Config keys that name a SimulationParams field directly (tax brackets,
    loan policy, schedules, ...) are passed through; unknown keys are
    reported and ignored. Fields behind a CLI flag come from ``r`` only.
    """
    kwargs = {CLI_FIELDS[key]: value for key, value in r.items()}
    for key, value in (config or {}).items():
        if key in CLI_FIELDS or key in _CLI_PARAMS:
            continue
        if key in _PARAM_FIELDS:
            kwargs[key] = value
        else:
            print(f"ignoring unknown config key: {key}", file=sys.stderr)
    params = SimulationParams(**kwargs)
    validate_params(params)
    return params


def parse_args(
    description: str,
    add_args_fn: Callable[[argparse.ArgumentParser], None] | None = None,
) -> tuple[SimulationParams, argparse.Namespace]:
    """Parse CLI args, load config, resolve values.

    Returns (params, namespace); namespace carries extra CLI args added via add_args_fn.
    """
    parser = create_parser(description)
    if add_args_fn:
        add_args_fn(parser)
    args = parser.parse_args()
    config = load_config(args.config)
    r = resolve(args, config)
    return build_params(r, config), args
