"""CLI entrypoint for task-progress."""

import logging
import sys
from collections.abc import Callable
from pathlib import Path

import rich_click as click

from task_progress import __version__
from task_progress.config import ConfigError
from task_progress.controllers import DemoCommand, ProgressCliController, RunPlanCommand
from task_progress.errors import TaskFailedError
from task_progress.plan import PlanError

click.rich_click.USE_MARKDOWN = True
CONTROLLER = ProgressCliController()


@click.group()
@click.version_option(version=__version__, prog_name="task-progress")
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default=None,
    help="Log level for diagnostics written to stderr. Without it only warnings are shown.",
)
def task_progress(log_level: str | None) -> None:
    """Run tasks with a live spinner and a final status glyph per task."""

    if log_level is None:
        return
    logging.basicConfig(
        level=log_level.upper(),
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        force=True,
    )


@task_progress.command("run")
@click.argument("plan_path", type=click.Path(path_type=Path, exists=True, dir_okay=False))
@click.option(
    "--frame-interval",
    type=click.FloatRange(min=0.01, max=5.0),
    default=None,
    help="Seconds between spinner frames. Defaults to TASK_PROGRESS_FRAME_INTERVAL_SECONDS.",
)
def run_plan(plan_path: Path, frame_interval: float | None) -> None:
    """Run the shell commands of a JSON plan, group by group.

    Plan format: `{"groups": [{"name": "...", "units": [{"description": "...",
    "command": "...", "allow_failure": false}]}]}`
    """

    _run_or_fail(
        lambda: CONTROLLER.run_plan(
            RunPlanCommand(plan_path=plan_path, frame_interval_seconds=frame_interval),
        ),
    )


@task_progress.command("demo")
@click.option(
    "--groups",
    type=click.IntRange(min=1, max=20),
    default=2,
    show_default=True,
    help="Number of groups.",
)
@click.option(
    "--units",
    type=click.IntRange(min=1, max=20),
    default=3,
    show_default=True,
    help="Units per group.",
)
@click.option(
    "--duration",
    type=click.FloatRange(min=0.0, max=60.0),
    default=1.0,
    show_default=True,
    help="Seconds each demo task sleeps.",
)
@click.option(
    "--fail-at",
    default=None,
    metavar="GROUP:UNIT",
    help="Make one demo task fail, for example 2:1.",
)
@click.option(
    "--frame-interval",
    type=click.FloatRange(min=0.01, max=5.0),
    default=None,
    help="Seconds between spinner frames. Defaults to TASK_PROGRESS_FRAME_INTERVAL_SECONDS.",
)
def demo(
    groups: int,
    units: int,
    duration: float,
    fail_at: str | None,
    frame_interval: float | None,
) -> None:
    """Show the reporter on sleep-based tasks."""

    parsed_fail_at = _parse_fail_at(fail_at) if fail_at is not None else None
    _run_or_fail(
        lambda: CONTROLLER.demo(
            DemoCommand(
                groups=groups,
                units=units,
                duration_seconds=duration,
                fail_at=parsed_fail_at,
                frame_interval_seconds=frame_interval,
            ),
        ),
    )


def _run_or_fail(action: Callable[[], None]) -> None:
    try:
        action()
    except TaskFailedError as error:
        raise click.ClickException(str(error)) from error
    except (PlanError, ConfigError) as error:
        raise click.UsageError(str(error)) from error


def _parse_fail_at(value: str) -> tuple[int, int]:
    group_raw, sep, unit_raw = value.partition(":")
    try:
        if not sep:
            raise ValueError(value)
        return int(group_raw), int(unit_raw)
    except ValueError as error:
        raise click.BadParameter(f"Expected GROUP:UNIT, got {value!r}", param_hint="--fail-at") from error


if __name__ == "__main__":  # pragma: no cover
    task_progress()
