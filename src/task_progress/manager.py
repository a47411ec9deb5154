"""Top-level sequential runner over task groups."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from task_progress.errors import TaskFailedError
from task_progress.group import TaskGroup

logger = logging.getLogger(__name__)


class ProgressManager:
    """Owns task groups and runs them in insertion order."""

    def __init__(self, groups: Iterable[TaskGroup] | None = None) -> None:
        self._groups: list[TaskGroup] = list(groups or ())

    def add_group(self, group: TaskGroup) -> ProgressManager:
        self._groups.append(group)
        return self

    def start(self) -> None:
        """Run every group with its 1-based index; failures propagate unchanged."""

        total = len(self._groups)
        for index, group in enumerate(self._groups, start=1):
            group.run(total, index)

    def run(self) -> int:
        """Run all groups for a script entry point.

        Returns ``0`` when everything succeeded. A failed task terminates with
        ``SystemExit(1)`` once the stack has unwound back here.
        """

        try:
            self.start()
        except TaskFailedError as error:
            logger.error("%s", error)
            raise SystemExit(1) from error
        return 0

    def __len__(self) -> int:
        return len(self._groups)

    def __iter__(self) -> Iterator[TaskGroup]:
        return iter(self._groups)
