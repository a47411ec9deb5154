"""Error types raised by the progress engine."""

from __future__ import annotations


class TaskProgressError(Exception):
    """Base error for the progress engine."""


class MissingWorkError(TaskProgressError):
    """Unit executed without work attached, or executed a second time."""

    def __init__(self, description: str) -> None:
        super().__init__(f"No work attached to unit {description!r} (never set or already consumed)")
        self.description = description


class TaskFailedError(TaskProgressError):
    """A unit finished in the failed state and no hook recovered it."""

    def __init__(
        self,
        *,
        description: str,
        group_index: int,
        total_groups: int,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(f"Task failed: [{group_index}/{total_groups}] {description}")
        self.description = description
        self.group_index = group_index
        self.total_groups = total_groups
        self.cause = cause
