"""Terminal task-progress reporter: live spinners and result glyphs for sequential tasks."""

from task_progress.config import ConfigError, Settings, StyleSettings
from task_progress.errors import MissingWorkError, TaskFailedError, TaskProgressError
from task_progress.group import TaskGroup
from task_progress.manager import ProgressManager
from task_progress.render import LineRenderer
from task_progress.status import SPINNER_FRAMES, ExecutionStatus, StatusCell
from task_progress.unit import ExecutionUnit

__version__ = "0.1.0"

__all__ = [
    "SPINNER_FRAMES",
    "ConfigError",
    "ExecutionStatus",
    "ExecutionUnit",
    "LineRenderer",
    "MissingWorkError",
    "ProgressManager",
    "Settings",
    "StatusCell",
    "StyleSettings",
    "TaskFailedError",
    "TaskGroup",
    "TaskProgressError",
    "__version__",
]
