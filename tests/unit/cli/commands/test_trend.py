"""Unit tests for the trend command."""

import datetime as dt

import click
import pytest

from agency_finance.cli import cli
from agency_finance.cli.commands.trend import parse_month_input


class TestParseMonthInput:
    """Test YYYY-MM parsing."""

    def test_valid_month(self):
        assert parse_month_input("2026-03") == dt.date(2026, 3, 1)

    @pytest.mark.parametrize("value", ["2026/03", "March", "2026-13"])
    def test_invalid_month(self, value):
        with pytest.raises(click.BadParameter, match="Expected YYYY-MM"):
            parse_month_input(value)


class TestTrendCommand:
    """Test suite for the trend command."""

    def test_table_output(self, runner, cli_env, snapshot_file):
        result = runner.invoke(
            cli, ["--snapshot", snapshot_file, "trend", "--until", "2026-03", "--months", "2"]
        )

        assert result.exit_code == 0, result.output
        assert "Feb 2026" in result.output
        assert "Mar 2026" in result.output
        assert "140,000" in result.output

    def test_csv_export(self, runner, cli_env, snapshot_file, tmp_path):
        csv_path = tmp_path / "trend.csv"

        result = runner.invoke(
            cli,
            [
                "--snapshot", snapshot_file, "trend",
                "--until", "2026-03", "--months", "2", "--csv", str(csv_path),
            ],
        )

        assert result.exit_code == 0, result.output
        assert f"Wrote 2 month(s) to {csv_path}" in result.output
        lines = csv_path.read_text().strip().splitlines()
        assert lines[0] == "month,revenue,costs,profit,hours_worked"
        assert lines[1].startswith("Feb 2026,30000,")
        assert lines[2].startswith("Mar 2026,140000,6000,134000,")

    def test_months_must_be_positive(self, runner, cli_env, snapshot_file):
        result = runner.invoke(cli, ["--snapshot", snapshot_file, "trend", "--months", "0"])

        assert result.exit_code == 2

    def test_invalid_until(self, runner, cli_env, snapshot_file):
        result = runner.invoke(cli, ["--snapshot", snapshot_file, "trend", "--until", "03-2026"])

        assert result.exit_code != 0
        assert "Expected YYYY-MM" in result.output
