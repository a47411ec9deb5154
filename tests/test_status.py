from __future__ import annotations

import threading
import time

import allure
import pytest

from task_progress.status import SPINNER_FRAMES, ExecutionStatus, StatusCell, spinner_frame

pytestmark = [
    allure.epic("Progress Reporter"),
    allure.feature("Status Cell"),
]


def test_status_cell_starts_in_progress() -> None:
    cell = StatusCell()
    assert cell.get() is ExecutionStatus.IN_PROGRESS
    assert not cell.is_terminal()


def test_complete_and_fail_are_whole_value_replacements() -> None:
    cell = StatusCell()
    cell.complete()
    assert cell.get() is ExecutionStatus.COMPLETED
    cell.fail()
    assert cell.get() is ExecutionStatus.FAILED
    assert cell.is_terminal()


def test_set_rejects_non_status_values() -> None:
    cell = StatusCell()
    with pytest.raises(TypeError, match="ExecutionStatus"):
        cell.set("completed")  # type: ignore[arg-type]


def test_wait_for_change_returns_after_timeout_without_change() -> None:
    cell = StatusCell()
    started = time.monotonic()
    assert cell.wait_for_change(ExecutionStatus.IN_PROGRESS, timeout=0.05) is ExecutionStatus.IN_PROGRESS
    assert time.monotonic() - started >= 0.04


def test_wait_for_change_wakes_up_on_update_from_another_thread() -> None:
    cell = StatusCell()
    timer = threading.Timer(0.02, cell.complete)
    timer.start()
    try:
        observed = cell.wait_for_change(ExecutionStatus.IN_PROGRESS, timeout=5.0)
    finally:
        timer.join()
    assert observed is ExecutionStatus.COMPLETED


def test_spinner_cycles_through_four_frames() -> None:
    assert SPINNER_FRAMES == ("—", "\\", "|", "/")
    assert [spinner_frame(i) for i in range(6)] == ["—", "\\", "|", "/", "—", "\\"]


def test_terminal_flag_per_status() -> None:
    assert not ExecutionStatus.IN_PROGRESS.is_terminal
    assert ExecutionStatus.COMPLETED.is_terminal
    assert ExecutionStatus.FAILED.is_terminal
