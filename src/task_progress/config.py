"""Runtime configuration for the progress reporter."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

Color = str | tuple[int, int, int]


class ConfigError(ValueError):
    """Invalid reporter configuration value."""


@dataclass(slots=True)
class StyleSettings:
    """Foreground colors for each rendered state."""

    in_progress_fg: Color = (121, 115, 118)
    success_fg: Color = "green"
    failure_fg: Color = "red"


@dataclass(slots=True)
class Settings:
    """Reporter settings with env-driven defaults."""

    frame_interval_seconds: float = 0.1
    max_frames: int = 0
    color: bool | None = None
    command_timeout_seconds: float | None = None
    styles: StyleSettings = field(default_factory=StyleSettings)

    @classmethod
    def from_env(cls, frame_interval_seconds: float | None = None) -> Settings:
        """Load settings from environment; explicit arguments win over env values."""

        settings = cls(
            frame_interval_seconds=(
                frame_interval_seconds
                if frame_interval_seconds is not None
                else _env_float("TASK_PROGRESS_FRAME_INTERVAL_SECONDS", 0.1)
            ),
            max_frames=_env_int("TASK_PROGRESS_MAX_FRAMES", 0),
            color=_env_optional_bool("TASK_PROGRESS_COLOR"),
            command_timeout_seconds=_env_optional_float("TASK_PROGRESS_COMMAND_TIMEOUT_SECONDS"),
        )
        settings.validate()
        return settings

    def validate(self) -> None:
        """Raise configuration error on out-of-range values."""

        if self.frame_interval_seconds <= 0:
            raise ConfigError("TASK_PROGRESS_FRAME_INTERVAL_SECONDS must be > 0.")
        if self.max_frames < 0:
            raise ConfigError("TASK_PROGRESS_MAX_FRAMES must be >= 0.")
        if self.command_timeout_seconds is not None and self.command_timeout_seconds <= 0:
            raise ConfigError("TASK_PROGRESS_COMMAND_TIMEOUT_SECONDS must be > 0.")


def _env_float(name: str, default: float) -> float:
    value = _env_optional_float(name)
    return default if value is None else value


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name, "").strip()
    if not value:
        return default
    try:
        return int(value)
    except ValueError as error:
        raise ConfigError(f"Invalid integer value for {name}: {value!r}") from error


def _env_optional_float(name: str) -> float | None:
    value = os.getenv(name, "").strip()
    if not value:
        return None
    try:
        return float(value)
    except ValueError as error:
        raise ConfigError(f"Invalid float value for {name}: {value!r}") from error


def _env_optional_bool(name: str) -> bool | None:
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    raise ConfigError(f"Invalid boolean value for {name}: {value!r}")
