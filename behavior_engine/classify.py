"""Event kind and field predicates."""

from __future__ import annotations

from typing import Any, Optional

from behavior_engine.schema import NEGATIVE_MOODS


def is_mood(event: Any) -> bool:
    return getattr(event, "kind", None) == "mood"


def is_stimulus(event: Any) -> bool:
    return getattr(event, "kind", None) == "stimulus"


def mood_label(event: Any) -> Optional[str]:
    return event.label if is_mood(event) else None


def stimulus_category(event: Any) -> Optional[str]:
    return event.category if is_stimulus(event) else None


def intensity(event: Any) -> Optional[str]:
    return event.intensity if is_stimulus(event) else None


def is_negative_mood(event: Any) -> bool:
    """Angry or Anxious mood report."""

    return mood_label(event) in NEGATIVE_MOODS


def is_high_intensity(event: Any) -> bool:
    return intensity(event) == "High"
