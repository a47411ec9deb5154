"""Controllers for task-progress CLI commands."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path

from task_progress.config import Settings
from task_progress.group import TaskGroup
from task_progress.manager import ProgressManager
from task_progress.plan import build_manager, load_plan
from task_progress.status import StatusCell
from task_progress.unit import ExecutionUnit, Work

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class RunPlanCommand:
    """CLI input for running a JSON plan."""

    plan_path: Path
    frame_interval_seconds: float | None = None


@dataclass(slots=True)
class DemoCommand:
    """CLI input for the sleep-based showcase."""

    groups: int = 2
    units: int = 3
    duration_seconds: float = 1.0
    fail_at: tuple[int, int] | None = None
    frame_interval_seconds: float | None = None


class ProgressCliController:
    """Build progress managers for CLI commands and run them.

    ``TaskFailedError`` is left to propagate so the CLI decides the exit code.
    """

    def run_plan(self, command: RunPlanCommand) -> None:
        settings = Settings.from_env(frame_interval_seconds=command.frame_interval_seconds)
        plan = load_plan(command.plan_path)
        manager = build_manager(plan, settings=settings)
        logger.info(
            "Running plan %s: %d groups, %d units",
            command.plan_path,
            len(plan.groups),
            sum(len(group.units) for group in plan.groups),
        )
        manager.start()

    def demo(self, command: DemoCommand) -> None:
        settings = Settings.from_env(frame_interval_seconds=command.frame_interval_seconds)
        manager = ProgressManager()
        for group_index in range(1, command.groups + 1):
            group = TaskGroup(name=f"group-{group_index}")
            for unit_index in range(1, command.units + 1):
                should_fail = command.fail_at == (group_index, unit_index)
                group.add_unit(
                    ExecutionUnit(f"Demo task {group_index}.{unit_index}", settings=settings).on_execute(
                        _sleep_work(command.duration_seconds, fail=should_fail),
                    ),
                )
            manager.add_group(group)
        manager.start()


def _sleep_work(duration_seconds: float, *, fail: bool) -> Work:
    def _work(status: StatusCell) -> None:
        time.sleep(duration_seconds)
        if fail:
            status.fail()
        else:
            status.complete()

    return _work
