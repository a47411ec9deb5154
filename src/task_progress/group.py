"""Ordered batch of execution units run one after another."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from task_progress.unit import ExecutionUnit

logger = logging.getLogger(__name__)


class TaskGroup:
    """Units execute strictly in insertion order, never concurrently."""

    def __init__(self, units: Iterable[ExecutionUnit] | None = None, *, name: str | None = None) -> None:
        self.name = name
        self._units: list[ExecutionUnit] = list(units or ())

    def add_unit(self, unit: ExecutionUnit) -> TaskGroup:
        self._units.append(unit)
        return self

    def run(self, total_groups: int, group_index: int) -> None:
        """Label and execute each unit; a ``TaskFailedError`` stops the group."""

        logger.debug(
            "Running group %d/%d (%s) with %d units",
            group_index,
            total_groups,
            self.name,
            len(self),
        )
        for unit in self._units:
            unit.set_group_index(group_index)
            unit.set_total_groups(total_groups)
            unit.execute()

    def __len__(self) -> int:
        return len(self._units)

    def __iter__(self) -> Iterator[ExecutionUnit]:
        return iter(self._units)
