"""Advisory pattern alerts over an event sequence."""

from __future__ import annotations

import logging
from datetime import tzinfo
from typing import Optional

from behavior_engine.classify import is_high_intensity, is_mood, is_negative_mood, is_stimulus
from behavior_engine.config import DEFAULT_CONFIG, AnalysisConfig
from behavior_engine.correlation import first_follow_up, resolve_all
from behavior_engine.schema import SEVERITY_INFO, SEVERITY_WARNING, Alert
from behavior_engine.timestamps import is_valid_instant, now_ms, to_datetime

logger = logging.getLogger(__name__)

WEEKDAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


def _count_recent(events: list, instants: list, cutoff: int, predicate) -> int:
    return sum(
        1
        for event, instant in zip(events, instants)
        if predicate(event) and is_valid_instant(instant) and instant >= cutoff
    )


def _acute_distress(events, instants, cutoff, now, config) -> list[Alert]:
    count = _count_recent(events, instants, cutoff, is_negative_mood)
    if count < config.distress_threshold:
        return []
    return [Alert(SEVERITY_WARNING, f"{count} anxious/angry logs in the past 2 hours", now)]


def _sensory_overload(events, instants, cutoff, now, config) -> list[Alert]:
    count = _count_recent(events, instants, cutoff, lambda e: is_stimulus(e) and is_high_intensity(e))
    if count < config.overload_threshold:
        return []
    return [Alert(SEVERITY_INFO, "Multiple high sensory intensity logs detected", now)]


def _weekly_recurrence(events, instants, now, config, tz) -> list[Alert]:
    # No time window: counts accumulate over the whole history.
    by_day: dict[str, dict[str, int]] = {}
    for event, instant in zip(events, instants):
        if not is_mood(event) or not is_valid_instant(instant):
            continue
        day = WEEKDAY_NAMES[to_datetime(instant, tz).weekday()]
        moods = by_day.setdefault(day, {})
        moods[event.label] = moods.get(event.label, 0) + 1

    alerts = []
    for day, moods in by_day.items():
        for mood, count in moods.items():
            if count >= config.recurrence_threshold:
                alerts.append(Alert(SEVERITY_INFO, f"Student typically feels {mood} on {day}s", now))
    return alerts


def _causal_triggers(events, instants, now, config) -> list[Alert]:
    alerts = []
    for index, event in enumerate(events):
        if not (is_stimulus(event) and is_high_intensity(event)):
            continue
        follow_up = first_follow_up(events, instants, index, config.window_ms, is_negative_mood)
        if follow_up is not None:
            alerts.append(
                Alert(
                    SEVERITY_WARNING,
                    f"High {event.category} input was followed by feeling {follow_up.label}",
                    now,
                )
            )
    return alerts


def detect_patterns(
    events: Optional[list],
    now: Optional[int] = None,
    config: AnalysisConfig = DEFAULT_CONFIG,
    tz: Optional[tzinfo] = None,
) -> list[Alert]:
    """Evaluate the four alert rules in order and concatenate their output.

    ``now`` is captured once; the trailing-window rules share one cutoff.
    ``tz`` selects the calendar used for weekday grouping.
    """

    if not events:
        return []

    now = now_ms() if now is None else now
    cutoff = now - config.window_ms
    instants = resolve_all(events, tz)

    alerts = _acute_distress(events, instants, cutoff, now, config)
    alerts += _sensory_overload(events, instants, cutoff, now, config)
    alerts += _weekly_recurrence(events, instants, now, config, tz)
    alerts += _causal_triggers(events, instants, now, config)

    logger.debug("Detected %d alerts over %d events", len(alerts), len(events))
    return alerts
