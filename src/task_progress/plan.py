"""JSON plans of shell commands and their translation into progress groups."""

from __future__ import annotations

import json
import logging
import shlex
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from task_progress.config import Settings
from task_progress.group import TaskGroup
from task_progress.manager import ProgressManager
from task_progress.render import LineRenderer
from task_progress.status import ExecutionStatus, StatusCell
from task_progress.unit import ExecutionUnit, Hook, Work

logger = logging.getLogger(__name__)


class PlanError(ValueError):
    """Plan file is missing, malformed or violates the plan contract."""


@dataclass(slots=True)
class PlanUnit:
    """One shell command shown as a single progress line."""

    description: str
    command: str
    allow_failure: bool = False
    timeout_seconds: float | None = None


@dataclass(slots=True)
class PlanGroup:
    """Ordered commands sharing one ``[i/n]`` label."""

    units: list[PlanUnit] = field(default_factory=list)
    name: str | None = None


@dataclass(slots=True)
class Plan:
    groups: list[PlanGroup] = field(default_factory=list)


def load_plan(path: Path) -> Plan:
    """Read and validate a plan file."""

    try:
        raw = json.loads(path.read_text("utf-8"))
    except OSError as error:
        raise PlanError(f"Cannot read plan file {path}: {error}") from error
    except json.JSONDecodeError as error:
        raise PlanError(f"Invalid JSON in plan file {path}: {error}") from error
    return parse_plan(raw)


def parse_plan(raw: Any) -> Plan:
    if not isinstance(raw, dict) or not isinstance(raw.get("groups"), list):
        raise PlanError("Plan must be an object with a 'groups' list.")
    if not raw["groups"]:
        raise PlanError("Plan must contain at least one group.")

    groups: list[PlanGroup] = []
    for group_pos, group_raw in enumerate(raw["groups"], start=1):
        if not isinstance(group_raw, dict) or not isinstance(group_raw.get("units"), list):
            raise PlanError(f"Group #{group_pos} must be an object with a 'units' list.")
        units = [
            _parse_unit(unit_raw, group_pos=group_pos, unit_pos=unit_pos)
            for unit_pos, unit_raw in enumerate(group_raw["units"], start=1)
        ]
        if not units:
            raise PlanError(f"Group #{group_pos} has no units.")
        name = group_raw.get("name")
        groups.append(PlanGroup(units=units, name=str(name) if name is not None else None))
    return Plan(groups=groups)


def _parse_unit(raw: Any, *, group_pos: int, unit_pos: int) -> PlanUnit:
    where = f"Unit #{unit_pos} of group #{group_pos}"
    if not isinstance(raw, dict):
        raise PlanError(f"{where} must be an object.")
    description = raw.get("description")
    command = raw.get("command")
    if not isinstance(description, str) or not description.strip():
        raise PlanError(f"{where} needs a non-empty 'description'.")
    if not isinstance(command, str) or not command.strip():
        raise PlanError(f"{where} needs a non-empty 'command'.")
    allow_failure = raw.get("allow_failure", False)
    if not isinstance(allow_failure, bool):
        raise PlanError(f"{where}: 'allow_failure' must be a boolean.")
    timeout = raw.get("timeout_seconds")
    if timeout is not None and (
        isinstance(timeout, bool) or not isinstance(timeout, int | float) or timeout <= 0
    ):
        raise PlanError(f"{where}: 'timeout_seconds' must be a positive number.")
    return PlanUnit(
        description=description.strip(),
        command=command,
        allow_failure=allow_failure,
        timeout_seconds=float(timeout) if timeout is not None else None,
    )


def shell_work(command: str, *, timeout_seconds: float | None = None) -> Work:
    """Build work that runs ``command`` and maps its exit code onto the status cell."""

    try:
        argv = shlex.split(command)
    except ValueError as error:
        raise PlanError(f"Cannot parse command {command!r}: {error}") from error
    if not argv:
        raise PlanError("Configured command is empty.")

    def _work(status: StatusCell) -> None:
        try:
            completed = subprocess.run(  # noqa: S603
                argv,
                check=False,
                capture_output=True,
                text=True,
                timeout=timeout_seconds,
            )
        except subprocess.TimeoutExpired:
            logger.warning("Command timed out after %ss: %s", timeout_seconds, command)
            status.fail()
            return
        except OSError as error:
            logger.warning("Command failed to start: %s (%s)", command, error)
            status.fail()
            return

        if completed.returncode == 0:
            status.complete()
            return
        logger.warning(
            "Command exit code=%d: %s stderr=%s",
            completed.returncode,
            command,
            _truncate(completed.stderr),
        )
        status.fail()

    return _work


def tolerate_failure(description: str) -> Hook:
    """Failure hook that records the failure and lets the run continue."""

    def _recover(status: StatusCell) -> None:
        logger.warning("Ignoring failure of %r (allow_failure)", description)
        status.set(ExecutionStatus.COMPLETED)

    return _recover


def build_manager(
    plan: Plan,
    *,
    settings: Settings,
    renderer: LineRenderer | None = None,
) -> ProgressManager:
    manager = ProgressManager()
    for plan_group in plan.groups:
        group = TaskGroup(name=plan_group.name)
        for plan_unit in plan_group.units:
            unit = ExecutionUnit(plan_unit.description, settings=settings, renderer=renderer)
            unit.on_execute(
                shell_work(
                    plan_unit.command,
                    timeout_seconds=plan_unit.timeout_seconds or settings.command_timeout_seconds,
                ),
            )
            if plan_unit.allow_failure:
                unit.on_failure(tolerate_failure(plan_unit.description))
            group.add_unit(unit)
        manager.add_group(group)
    return manager


def _truncate(value: str, *, limit: int = 240) -> str:
    compact = value.strip().replace("\n", " ")
    if len(compact) <= limit:
        return compact
    return compact[:limit] + "..."
