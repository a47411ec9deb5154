"""Terminal rendering of unit progress lines."""

from __future__ import annotations

import sys
from typing import IO

import click

from task_progress.config import StyleSettings
from task_progress.status import FAILURE_GLYPH, SUCCESS_GLYPH, ExecutionStatus

CLEAR_LINE = "\r\x1b[2K"


def format_label(group_index: int, total_groups: int, description: str, glyph: str) -> str:
    return f"[{group_index}/{total_groups}] {description} {glyph}"


class LineRenderer:
    """Draw spinner frames in place and the final glyph line.

    ``file=None`` resolves to the current stdout at write time, which keeps
    ``CliRunner`` output capture working. ``color=None`` lets click decide
    whether to keep ANSI styles based on the target stream.
    """

    def __init__(
        self,
        *,
        file: IO[str] | None = None,
        color: bool | None = None,
        styles: StyleSettings | None = None,
    ) -> None:
        self._file = file
        self._color = color
        self._styles = styles or StyleSettings()

    def frame(self, label: str) -> None:
        styled = click.style(label, fg=self._styles.in_progress_fg)
        click.echo(f"{CLEAR_LINE}{styled}", file=self._file, nl=False, color=self._color)
        self._flush()

    def result(self, status: ExecutionStatus, group_index: int, total_groups: int, description: str) -> None:
        if status is ExecutionStatus.COMPLETED:
            glyph, fg = SUCCESS_GLYPH, self._styles.success_fg
        elif status is ExecutionStatus.FAILED:
            glyph, fg = FAILURE_GLYPH, self._styles.failure_fg
        else:
            raise ValueError(f"Not a terminal status: {status.value}")
        click.echo(CLEAR_LINE, file=self._file, nl=False, color=self._color)
        line = format_label(group_index, total_groups, description, glyph)
        click.echo(click.style(line, fg=fg), file=self._file, color=self._color)
        self._flush()

    def _flush(self) -> None:
        (self._file or sys.stdout).flush()
