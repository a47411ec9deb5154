"""Shared status cell coordinating a unit's worker and its display loop."""

from __future__ import annotations

import threading
from enum import Enum

SPINNER_FRAMES: tuple[str, ...] = ("—", "\\", "|", "/")
SUCCESS_GLYPH = "✔"
FAILURE_GLYPH = "✘"


class ExecutionStatus(str, Enum):
    """Execution unit lifecycle states."""

    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self is not ExecutionStatus.IN_PROGRESS


class StatusCell:
    """Lock-guarded tri-state value shared by exactly two actors.

    The worker (and any hook it runs) writes, the display loop reads. Updates
    are whole-value replacements, so a single lock is enough; the condition
    lets the poller wake up as soon as the value changes instead of waiting
    out a full frame interval.
    """

    def __init__(self, initial: ExecutionStatus = ExecutionStatus.IN_PROGRESS) -> None:
        self._value = initial
        self._changed = threading.Condition(threading.Lock())

    def get(self) -> ExecutionStatus:
        with self._changed:
            return self._value

    def set(self, status: ExecutionStatus) -> None:
        if not isinstance(status, ExecutionStatus):
            raise TypeError(f"Expected ExecutionStatus, got {type(status).__name__}")
        with self._changed:
            self._value = status
            self._changed.notify_all()

    def complete(self) -> None:
        self.set(ExecutionStatus.COMPLETED)

    def fail(self) -> None:
        self.set(ExecutionStatus.FAILED)

    def is_terminal(self) -> bool:
        return self.get().is_terminal

    def wait_for_change(self, previous: ExecutionStatus, timeout: float) -> ExecutionStatus:
        """Block until the value differs from ``previous`` or ``timeout`` elapses."""

        with self._changed:
            self._changed.wait_for(lambda: self._value is not previous, timeout=timeout)
            return self._value

    def __repr__(self) -> str:
        return f"StatusCell({self.get().value})"


def spinner_frame(index: int) -> str:
    return SPINNER_FRAMES[index % len(SPINNER_FRAMES)]
