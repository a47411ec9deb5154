"""Execution unit: one task with a background worker and a foreground display loop."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

from task_progress.config import Settings
from task_progress.errors import MissingWorkError, TaskFailedError
from task_progress.render import LineRenderer, format_label
from task_progress.status import ExecutionStatus, StatusCell, spinner_frame

logger = logging.getLogger(__name__)

Work = Callable[[StatusCell], None]
Hook = Callable[[StatusCell], None]


class ExecutionUnit:
    """One named task.

    ``work`` receives the shared status cell and is expected to move it to
    ``COMPLETED`` or ``FAILED``. Hooks are keyed by the status the work left
    behind. A failure hook either terminates the process itself (for example
    ``sys.exit``) or moves the status out of ``FAILED`` to recover; leaving it
    ``FAILED`` makes :meth:`execute` raise :class:`TaskFailedError`.
    """

    def __init__(
        self,
        description: str,
        *,
        settings: Settings | None = None,
        renderer: LineRenderer | None = None,
    ) -> None:
        self._description = description
        self._settings = settings or Settings()
        self._renderer = renderer or LineRenderer(
            color=self._settings.color,
            styles=self._settings.styles,
        )
        self.status = StatusCell()
        self.group_index = 0
        self.total_groups = 0
        self.failure_handled = False
        self.error: BaseException | None = None
        self._work: Work | None = None
        self._on_success: Hook | None = None
        self._on_failure: Hook | None = None
        self._terminal_rendered = threading.Event()
        self._fatal_error: BaseException | None = None
        self._forced_failure = False

    @property
    def description(self) -> str:
        return self._description

    @property
    def label(self) -> str:
        return f"[{self.group_index}/{self.total_groups}] {self._description}"

    @property
    def final_status(self) -> ExecutionStatus:
        return self.status.get()

    def on_execute(self, work: Work) -> ExecutionUnit:
        self._work = self._checked_slot("work", self._work, work)
        return self

    def on_success(self, handler: Hook) -> ExecutionUnit:
        self._on_success = self._checked_slot("on_success", self._on_success, handler)
        return self

    def on_failure(self, handler: Hook) -> ExecutionUnit:
        self._on_failure = self._checked_slot("on_failure", self._on_failure, handler)
        return self

    def set_group_index(self, index: int) -> None:
        self.group_index = index

    def set_total_groups(self, total: int) -> None:
        self.total_groups = total

    def execute(self) -> None:
        """Run work in a worker thread while rendering progress on this thread.

        Returns once the worker (and any hook) has finished. Raises
        :class:`MissingWorkError` when no work is attached, which includes a
        second call, and :class:`TaskFailedError` when the unit ends ``FAILED``.
        """

        if self._work is None:
            raise MissingWorkError(self._description)
        work, self._work = self._work, None
        on_success, self._on_success = self._on_success, None
        on_failure, self._on_failure = self._on_failure, None

        worker = threading.Thread(
            target=self._run_worker,
            args=(work, on_success, on_failure),
            daemon=True,
            name="task-progress-unit",
        )
        logger.debug("Starting worker for %s", self.label)
        worker.start()
        try:
            self._display_progress()
        except BaseException:
            self._terminal_rendered.set()
            raise
        if self._forced_failure:
            # Work may be hung; give it one frame to finish, then leave the daemon thread behind.
            worker.join(timeout=self._settings.frame_interval_seconds)
            if worker.is_alive():
                logger.warning("Abandoning still-running worker for %s", self.label)
            raise TaskFailedError(
                description=self._description,
                group_index=self.group_index,
                total_groups=self.total_groups,
                cause=self.error,
            )
        worker.join()
        logger.debug("Worker for %s finished with status=%s", self.label, self.final_status.value)

        if self._fatal_error is not None:
            raise self._fatal_error
        if self.final_status is ExecutionStatus.FAILED:
            raise TaskFailedError(
                description=self._description,
                group_index=self.group_index,
                total_groups=self.total_groups,
                cause=self.error,
            )

    def _run_worker(self, work: Work, on_success: Hook | None, on_failure: Hook | None) -> None:
        try:
            work(self.status)
        except Exception as exc:  # noqa: BLE001
            logger.exception("Work for %s raised", self.label)
            self.error = exc
            self.status.fail()
        except BaseException as exc:  # noqa: BLE001
            self._fatal_error = exc
            self.status.fail()
            return

        final = self.status.get()
        if not final.is_terminal:
            logger.warning("Work for %s returned without a final status", self.label)
            return

        self._terminal_rendered.wait()
        if self._forced_failure:
            logger.warning("Work for %s finished after it was marked failed, skipping hooks", self.label)
            return
        try:
            if final is ExecutionStatus.COMPLETED and on_success is not None:
                on_success(self.status)
            elif final is ExecutionStatus.FAILED:
                if on_failure is None:
                    logger.warning("%s failed with no failure hook attached", self.label)
                    return
                self.failure_handled = True
                on_failure(self.status)
        except BaseException as exc:  # noqa: BLE001
            self._fatal_error = exc

    def _display_progress(self) -> None:
        max_frames = self._settings.max_frames
        frame = 0
        current = self.status.get()
        while current is ExecutionStatus.IN_PROGRESS:
            if max_frames and frame >= max_frames:
                logger.warning("%s still in progress after %d frames, marking failed", self.label, frame)
                self._forced_failure = True
                self.status.fail()
                current = ExecutionStatus.FAILED
                break
            self._renderer.frame(
                format_label(self.group_index, self.total_groups, self._description, spinner_frame(frame)),
            )
            frame += 1
            current = self.status.wait_for_change(current, timeout=self._settings.frame_interval_seconds)

        self._renderer.result(current, self.group_index, self.total_groups, self._description)
        self._terminal_rendered.set()

    def _checked_slot(self, name: str, existing: Callable | None, value: Callable) -> Callable:
        if not callable(value):
            raise TypeError(f"{name} must be callable, got {type(value).__name__}")
        if existing is not None:
            logger.debug("Overwriting %s for unit %r", name, self._description)
        return value

    def __repr__(self) -> str:
        return f"ExecutionUnit({self._description!r}, status={self.final_status.value})"
