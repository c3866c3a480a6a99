"""Analysis thresholds and environment overrides."""

from __future__ import annotations

import os
from dataclasses import dataclass

TWO_HOURS_MS = 2 * 60 * 60 * 1000


def _env_int(key: str, default: int) -> int:
    raw = os.getenv(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"{key} must be an integer, got {raw!r}") from exc
    return value


@dataclass(frozen=True)
class AnalysisConfig:
    """Window length and alert thresholds used by the engine."""

    window_ms: int = TWO_HOURS_MS
    distress_threshold: int = 3
    overload_threshold: int = 2
    recurrence_threshold: int = 3

    def __post_init__(self) -> None:
        for name in ("window_ms", "distress_threshold", "overload_threshold", "recurrence_threshold"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive")

    @classmethod
    def from_env(cls, prefix: str = "BEHAVIOR_ENGINE_") -> "AnalysisConfig":
        """Build a config from ``<prefix>WINDOW_MS`` style variables."""

        return cls(
            window_ms=_env_int(f"{prefix}WINDOW_MS", TWO_HOURS_MS),
            distress_threshold=_env_int(f"{prefix}DISTRESS_THRESHOLD", 3),
            overload_threshold=_env_int(f"{prefix}OVERLOAD_THRESHOLD", 2),
            recurrence_threshold=_env_int(f"{prefix}RECURRENCE_THRESHOLD", 3),
        )


DEFAULT_CONFIG = AnalysisConfig()
