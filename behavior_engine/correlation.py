"""Stimulus -> mood correlation counting over a forward time window.

Sequences must be non-decreasing in resolved instant: the forward scan stops
at the first event past the deadline. Callers that cannot guarantee order
should pass ``sort_events(events)``.
"""

from __future__ import annotations

import logging
from datetime import tzinfo
from typing import Any, Callable, Optional

from behavior_engine.classify import is_mood, stimulus_category
from behavior_engine.config import TWO_HOURS_MS
from behavior_engine.schema import CORE_SENSORY_CATEGORIES, MOODS, CorrelationPair
from behavior_engine.timestamps import is_valid_instant, resolve_instant

logger = logging.getLogger(__name__)


def resolve_all(events: list, tz: Optional[tzinfo] = None) -> list[Optional[int]]:
    """Resolve every event's instant once, in sequence order."""

    return [resolve_instant(event, tz) for event in events]


def first_follow_up(
    events: list,
    instants: list[Optional[int]],
    start: int,
    window_ms: int,
    predicate: Callable[[Any], bool],
) -> Optional[Any]:
    """Return the first event after ``start`` matching ``predicate`` in the window.

    The window is ``(instant, instant + window_ms]`` with an inclusive upper
    bound. Events with an invalid instant are skipped; an invalid start
    instant opens no window.
    """

    origin = instants[start]
    if not is_valid_instant(origin):
        return None

    deadline = origin + window_ms
    for index in range(start + 1, len(events)):
        instant = instants[index]
        if not is_valid_instant(instant):
            continue
        if instant > deadline:
            break
        if predicate(events[index]):
            return events[index]
    return None


def compute_correlations(
    events: Optional[list],
    stimulus_categories: tuple[str, ...] = CORE_SENSORY_CATEGORIES,
    mood_labels: tuple[str, ...] = MOODS,
    window_ms: int = TWO_HOURS_MS,
    tz: Optional[tzinfo] = None,
) -> list[CorrelationPair]:
    """Count, per (category, mood), stimuli followed by that mood in the window.

    Each stimulus occurrence contributes at most one count per mood. Pairs
    are ordered categories outer, moods inner; zero counts are dropped.
    """

    if not events:
        return []

    instants = resolve_all(events, tz)
    pairs: list[CorrelationPair] = []

    for category in stimulus_categories:
        positions = [i for i, event in enumerate(events) if stimulus_category(event) == category]
        for mood in mood_labels:

            def matches(event: Any, mood: str = mood) -> bool:
                return is_mood(event) and event.label == mood

            count = sum(
                1 for position in positions if first_follow_up(events, instants, position, window_ms, matches) is not None
            )
            if count:
                pairs.append(CorrelationPair(category, mood, count))

    logger.debug("Computed %d correlation pairs over %d events", len(pairs), len(events))
    return pairs
