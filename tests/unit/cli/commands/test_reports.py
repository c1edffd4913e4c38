"""Unit tests for the report commands."""

import json
from decimal import Decimal

from agency_finance.cli import cli


def invoke_json(runner, snapshot_file, *args):
    result = runner.invoke(cli, ["--snapshot", snapshot_file, *args, "--json"])
    assert result.exit_code == 0, result.output
    return json.loads(result.stdout)


class TestOverviewCommand:
    """Test suite for the overview command."""

    def test_json_summary(self, runner, cli_env, snapshot_file):
        data = invoke_json(runner, snapshot_file, "overview")

        summary = data["summary"]
        assert Decimal(summary["total_revenue"]) == Decimal("170000")
        assert Decimal(summary["total_labor_cost"]) == Decimal("6000")
        assert Decimal(summary["profit_margin"]) == Decimal("96.47")
        assert [row["id"] for row in data["project_breakdown"]] == ["p-1", "p-2"]

    def test_table_output(self, runner, cli_env, snapshot_file):
        result = runner.invoke(cli, ["--snapshot", snapshot_file, "overview"])

        assert result.exit_code == 0, result.output
        assert "Summary" in result.output
        assert "170,000 PKR" in result.output
        assert "Storefront" in result.output
        assert "Ada Malik" in result.output

    def test_missing_snapshot_configuration(self, runner, cli_env):
        result = runner.invoke(cli, ["overview"])

        assert result.exit_code == 1
        assert "No snapshot file given" in result.output
        assert "--snapshot PATH" in result.output

    def test_snapshot_from_environment(self, runner, cli_env, snapshot_file, monkeypatch):
        monkeypatch.setenv("SNAPSHOT_FILE", snapshot_file)

        result = runner.invoke(cli, ["overview", "--json"])

        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)["summary"]["total_milestones_pending"] == 1

    def test_missing_snapshot_file(self, runner, cli_env, tmp_path):
        result = runner.invoke(
            cli, ["--snapshot", str(tmp_path / "absent.json"), "overview"]
        )

        assert result.exit_code == 2
        assert "Snapshot file not found" in result.output

    def test_invalid_snapshot(self, runner, cli_env, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{oops")

        result = runner.invoke(cli, ["--snapshot", str(path), "overview"])

        assert result.exit_code == 3
        assert "Validation Error" in result.output


class TestProjectCommands:
    """Test suite for project and project-summary commands."""

    def test_project_json(self, runner, cli_env, snapshot_file):
        data = invoke_json(runner, snapshot_file, "project", "p-1")

        assert data["project"]["name"] == "Storefront"
        assert Decimal(data["cost_breakdown"]["total_cost"]) == Decimal("4000")
        assert [task["id"] for task in data["task_costs"]] == ["t-1", "t-2", "t-3"]

    def test_project_table(self, runner, cli_env, snapshot_file):
        result = runner.invoke(cli, ["--snapshot", snapshot_file, "project", "p-1"])

        assert result.exit_code == 0, result.output
        assert "Storefront (Acme)" in result.output
        assert "Checkout" in result.output
        assert "DEVELOPER" in result.output

    def test_unknown_project(self, runner, cli_env, snapshot_file):
        result = runner.invoke(cli, ["--snapshot", snapshot_file, "project", "p-404"])

        assert result.exit_code == 2
        assert "Project not found: p-404" in result.output

    def test_project_summary_json(self, runner, cli_env, snapshot_file):
        data = invoke_json(runner, snapshot_file, "project-summary", "p-1")

        assert Decimal(data["time_tracking"]["efficiency"]) == Decimal("46.15")
        assert data["tasks"]["completed"] == 1

    def test_project_summary_table(self, runner, cli_env, snapshot_file):
        result = runner.invoke(
            cli, ["--snapshot", snapshot_file, "project-summary", "p-1"]
        )

        assert result.exit_code == 0, result.output
        assert "Efficiency" in result.output
        assert "Quinn Shah" in result.output


class TestDeveloperCommand:
    """Test suite for the developer command."""

    def test_developer_json(self, runner, cli_env, snapshot_file):
        data = invoke_json(runner, snapshot_file, "developer", "w-dev")

        assert data["name"] == "Ada Malik"
        assert Decimal(data["total_hours_worked"]) == Decimal("5")
        assert Decimal(data["total_earnings"]) == Decimal("5000")
        assert data["tasks_completed"] == 1
        assert data["tasks_assigned"] == 2

    def test_unknown_developer(self, runner, cli_env, snapshot_file):
        result = runner.invoke(cli, ["--snapshot", snapshot_file, "developer", "w-404"])

        assert result.exit_code == 2
        assert "Developer not found: w-404" in result.output


class TestListingCommands:
    """Test suite for milestones and time-breakdown commands."""

    def test_milestones_newest_first(self, runner, cli_env, snapshot_file):
        data = invoke_json(runner, snapshot_file, "milestones", "--project", "p-1")

        assert [m["id"] for m in data] == ["m-3", "m-2", "m-1"]

    def test_milestones_table(self, runner, cli_env, snapshot_file):
        result = runner.invoke(cli, ["--snapshot", snapshot_file, "milestones"])

        assert result.exit_code == 0, result.output
        assert "Found 4 milestone(s)" in result.output

    def test_time_breakdown_json(self, runner, cli_env, snapshot_file):
        data = invoke_json(runner, snapshot_file, "time-breakdown")

        assert [p["id"] for p in data] == ["p-1", "p-2"]

    def test_time_breakdown_table(self, runner, cli_env, snapshot_file):
        result = runner.invoke(cli, ["--snapshot", snapshot_file, "time-breakdown"])

        assert result.exit_code == 0, result.output
        assert "Checkout" in result.output
        assert "Login" in result.output
