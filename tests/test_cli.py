from __future__ import annotations

import json
import shlex
import sys
from pathlib import Path

import allure
import click
import pytest
from click.testing import CliRunner

from task_progress.main import _run_or_fail, task_progress
from task_progress.plan import PlanError

pytestmark = [
    allure.epic("Progress Reporter"),
    allure.feature("CLI"),
]

_PYTHON = shlex.quote(sys.executable)


def _write_plan(path: Path, units: list[dict]) -> Path:
    path.write_text(json.dumps({"groups": [{"name": "main", "units": units}]}), "utf-8")
    return path


def test_demo_runs_all_groups() -> None:
    runner = CliRunner()
    result = runner.invoke(
        task_progress,
        ["demo", "--groups", "2", "--units", "2", "--duration", "0", "--frame-interval", "0.01"],
    )
    assert result.exit_code == 0, result.output
    for label in (
        "[1/2] Demo task 1.1 ✔",
        "[1/2] Demo task 1.2 ✔",
        "[2/2] Demo task 2.1 ✔",
        "[2/2] Demo task 2.2 ✔",
    ):
        assert label in result.output


def test_demo_failure_exits_non_zero_and_stops() -> None:
    runner = CliRunner()
    result = runner.invoke(
        task_progress,
        [
            "demo",
            "--groups",
            "1",
            "--units",
            "3",
            "--duration",
            "0",
            "--frame-interval",
            "0.01",
            "--fail-at",
            "1:2",
        ],
    )
    assert result.exit_code == 1
    assert "[1/1] Demo task 1.1 ✔" in result.output
    assert "[1/1] Demo task 1.2 ✘" in result.output
    assert "Demo task 1.3" not in result.output
    assert "Task failed: [1/1] Demo task 1.2" in result.output


def test_demo_rejects_malformed_fail_at() -> None:
    runner = CliRunner()
    result = runner.invoke(task_progress, ["demo", "--fail-at", "two"])
    assert result.exit_code == 2
    assert "GROUP:UNIT" in result.output


def test_run_plan_succeeds(tmp_path: Path) -> None:
    plan = _write_plan(
        tmp_path / "plan.json",
        [{"description": "noop", "command": f"{_PYTHON} -c pass"}],
    )
    runner = CliRunner()
    result = runner.invoke(task_progress, ["run", str(plan), "--frame-interval", "0.01"])
    assert result.exit_code == 0, result.output
    assert "[1/1] noop ✔" in result.output


def test_run_plan_failure_exits_non_zero(tmp_path: Path) -> None:
    plan = _write_plan(
        tmp_path / "plan.json",
        [{"description": "explode", "command": f"{_PYTHON} -c 'raise SystemExit(3)'"}],
    )
    runner = CliRunner()
    result = runner.invoke(task_progress, ["run", str(plan), "--frame-interval", "0.01"])
    assert result.exit_code == 1
    assert "[1/1] explode ✘" in result.output
    assert "Task failed: [1/1] explode" in result.output


def test_run_plan_reports_invalid_plan_as_usage_error(tmp_path: Path) -> None:
    plan = tmp_path / "plan.json"
    plan.write_text(json.dumps({"groups": []}), "utf-8")
    runner = CliRunner()
    result = runner.invoke(task_progress, ["run", str(plan)])
    assert result.exit_code == 2
    assert "at least one group" in result.output


def test_invalid_env_config_is_a_usage_error_naming_the_variable(monkeypatch) -> None:
    monkeypatch.setenv("TASK_PROGRESS_MAX_FRAMES", "x")
    runner = CliRunner()
    result = runner.invoke(task_progress, ["demo", "--duration", "0"])
    assert result.exit_code == 2
    assert "TASK_PROGRESS_MAX_FRAMES" in result.output


def test_runtime_value_error_is_not_reported_as_usage_error() -> None:
    def _hook_blew_up() -> None:
        raise ValueError("bad value from a hook")

    with pytest.raises(ValueError, match="bad value from a hook"):
        _run_or_fail(_hook_blew_up)


def test_plan_error_becomes_usage_error() -> None:
    def _bad_plan() -> None:
        raise PlanError("Plan must contain at least one group.")

    with pytest.raises(click.UsageError, match="at least one group"):
        _run_or_fail(_bad_plan)
