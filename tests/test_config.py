"""Tests for TOML config loading and CLI resolution."""

import argparse

import pytest
from campus_housing_sim.config import DEFAULTS, build_params, create_parser, load_config, resolve
from campus_housing_sim.errors import InvalidAmountError


def _write(tmp_path, text: str):
    path = tmp_path / "config.toml"
    path.write_text(text)
    return path


class TestLoadConfig:
    def test_missing_file(self, tmp_path):
        assert load_config(tmp_path / "nope.toml") == {}

    def test_schedules_and_windows(self, tmp_path):
        path = _write(tmp_path, """
start_date = 2022-01-01
sale_date = "none"
hap_windows = [["2020-03-15", 2022-06-30, 36]]
federal_brackets = [[0, 0.1], [50000, 0.2]]

[inflation_schedule]
"2022" = 0.08
""")
        config = load_config(path)
        assert config["start_date"] == "2022-01-01"
        assert config["sale_date"] is None
        assert config["inflation_schedule"] == {2022: 0.08}
        assert config["hap_windows"] == [("2020-03-15", "2022-06-30", 36)]
        assert config["federal_brackets"] == [(0, 0.1), (50000, 0.2)]

    def test_bad_schedule_year(self, tmp_path):
        path = _write(tmp_path, '[raise_schedule]\nnext = 0.05\n')
        with pytest.raises(InvalidAmountError):
            load_config(path)

    def test_malformed_toml(self, tmp_path):
        path = _write(tmp_path, "salary = = 3\n")
        with pytest.raises(SystemExit):
            load_config(path)


class TestResolve:
    def _args(self, *argv):
        return create_parser("test").parse_args(list(argv))

    def test_defaults(self):
        r = resolve(self._args(), {})
        assert r == DEFAULTS

    def test_config_over_default(self):
        r = resolve(self._args(), {"salary": 9000})
        assert r["salary"] == 9000

    def test_cli_over_config(self):
        r = resolve(self._args("--salary", "9500"), {"salary": 9000})
        assert r["salary"] == 9500.0

    def test_cli_disables_sale(self):
        r = resolve(self._args("--sale-date", "none"), {"sale_date": "2040-01-01"})
        assert r["sale_date"] is None

    def test_missing_namespace_attrs(self):
        r = resolve(argparse.Namespace(), {"home_fmv": 2000000})
        assert r["home_fmv"] == 2000000


class TestBuildParams:
    def test_cli_keys_map_to_fields(self):
        r = dict(DEFAULTS, salary=9000.0, balance_posttax=300000.0)
        params = build_params(r)
        assert params.buyer_salary == 9000.0
        assert params.buyer_balance_posttax == 300000.0

    def test_advanced_keys_pass_through(self):
        params = build_params(dict(DEFAULTS), {"zip_paydown": 12000.0, "inflation_schedule": {2022: 0.07}})
        assert params.zip_paydown == 12000.0
        assert params.get_inflation_rate(2022) == 0.07

    def test_unknown_key_ignored(self, capsys):
        params = build_params(dict(DEFAULTS), {"colour": "blue"})
        assert params.buyer_salary == DEFAULTS["salary"]
        assert "colour" in capsys.readouterr().err

    def test_invalid_value_rejected(self):
        with pytest.raises(InvalidAmountError):
            build_params(dict(DEFAULTS, salary="lots"))

    def test_cli_flag_beats_field_named_config_key(self):
        parser = create_parser("test")
        config = {"buyer_salary": 9000.0, "home_fmv": 1000000.0}
        args = parser.parse_args(["--salary", "10000", "--home-fmv", "1200000"])
        params = build_params(resolve(args, config), config)
        assert params.buyer_salary == 10000.0
        assert params.home_fmv == 1200000.0

    def test_field_named_config_key_beats_default(self):
        config = {"buyer_salary": 9000.0, "known_sale_price": "none"}
        params = build_params(resolve(create_parser("test").parse_args([]), config), config)
        assert params.buyer_salary == 9000.0
        assert params.known_sale_price is None
