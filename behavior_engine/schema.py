"""Core data schema for observation events."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

MOODS = ("Happy", "Sad", "Angry", "Anxious")
NEGATIVE_MOODS = ("Angry", "Anxious")

CORE_SENSORY_CATEGORIES = ("Visual", "Auditory", "Tactile")
SENSORY_CATEGORIES = CORE_SENSORY_CATEGORIES + (
    "Olfactory",
    "Gustatory",
    "Vestibular",
    "Proprioception",
)

INTENSITIES = ("Low", "Medium", "High")

SEVERITY_WARNING = "warning"
SEVERITY_INFO = "info"

# Resolved instants are epoch milliseconds; None marks an event whose time
# could not be derived from any of its fields.
INVALID_INSTANT = None

RawTime = Union[int, float, str, None]


@dataclass(frozen=True)
class MoodEvent:
    """Emotional-state report."""

    label: str
    timestamp: RawTime = None
    record_id: RawTime = None
    note: Optional[str] = None

    kind = "mood"


@dataclass(frozen=True)
class StimulusEvent:
    """Sensory-input report with a category and an intensity level."""

    category: str
    intensity: str
    timestamp: RawTime = None
    record_id: RawTime = None
    note: Optional[str] = None

    kind = "stimulus"


Event = Union[MoodEvent, StimulusEvent]


@dataclass(frozen=True)
class CorrelationPair:
    stimulus_category: str
    mood_label: str
    occurrence_count: int


@dataclass(frozen=True)
class Alert:
    severity: str
    message: str
    generated_at: int
