"""Shared test fixtures."""

from __future__ import annotations

import io

import pytest

from task_progress.config import Settings
from task_progress.render import LineRenderer
from task_progress.unit import ExecutionUnit


@pytest.fixture()
def fast_settings() -> Settings:
    return Settings(frame_interval_seconds=0.01, color=False)


@pytest.fixture()
def terminal() -> io.StringIO:
    return io.StringIO()


@pytest.fixture()
def renderer(terminal: io.StringIO) -> LineRenderer:
    return LineRenderer(file=terminal, color=False)


@pytest.fixture()
def make_unit(fast_settings, renderer):
    """Build units that render into the shared in-memory terminal."""

    def _make(description: str) -> ExecutionUnit:
        return ExecutionUnit(description, settings=fast_settings, renderer=renderer)

    return _make
