"""Timestamp normalization.

Events arrive with heterogeneous time fields: an epoch-millisecond number, a
date string, or only a legacy record identifier that is itself either. Every
analysis step goes through ``resolve_instant`` so that the forward-window
scans compare plain epoch milliseconds.
"""

from __future__ import annotations

import logging
import time
from datetime import datetime, tzinfo
from numbers import Real
from typing import Any, Optional

from behavior_engine.schema import INVALID_INSTANT

logger = logging.getLogger(__name__)

# datetime covers years 1-9999; one day of margin keeps any UTC offset in range.
_MIN_INSTANT = -62_135_510_400_000
_MAX_INSTANT = 253_402_214_399_999


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def _parse_date_string(value: str, tz: Optional[tzinfo]) -> Optional[int]:
    text = value.strip()
    if not text:
        return INVALID_INSTANT
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return INVALID_INSTANT

    if parsed.tzinfo is None and tz is not None:
        parsed = parsed.replace(tzinfo=tz)
    try:
        instant = int(round(parsed.timestamp() * 1000))
    except (OverflowError, OSError, ValueError):
        return INVALID_INSTANT
    return _from_number(instant)


def _from_number(value: Real) -> Optional[int]:
    # NaN fails both comparisons.
    if not _MIN_INSTANT <= value <= _MAX_INSTANT:
        return INVALID_INSTANT
    return int(value)


def resolve_instant(event: Any, tz: Optional[tzinfo] = None) -> Optional[int]:
    """Return the event's instant in epoch milliseconds, or INVALID_INSTANT.

    Naive date strings are read in ``tz`` (local time when ``tz`` is None).
    """

    raw = getattr(event, "timestamp", None)
    instant = INVALID_INSTANT
    if _is_number(raw):
        instant = _from_number(raw)
    elif isinstance(raw, str):
        instant = _parse_date_string(raw, tz)
    if instant is not INVALID_INSTANT:
        return instant

    record_id = getattr(event, "record_id", None)
    if _is_number(record_id):
        return _from_number(record_id)
    if isinstance(record_id, str):
        return _parse_date_string(record_id, tz)

    logger.debug("Unresolvable instant for %r", event)
    return INVALID_INSTANT


def is_valid_instant(instant: Optional[int]) -> bool:
    return instant is not INVALID_INSTANT


def to_datetime(instant: int, tz: Optional[tzinfo] = None) -> datetime:
    """Convert epoch milliseconds to an aware (or local naive) datetime."""

    return datetime.fromtimestamp(instant / 1000.0, tz=tz)


def now_ms() -> int:
    return int(time.time() * 1000)


def sort_events(events: list, tz: Optional[tzinfo] = None) -> list:
    """Return a chronological copy; events without an instant go last."""

    if not events:
        return []

    def _key(item: tuple[int, Any]) -> tuple[int, int, int]:
        position, event = item
        instant = resolve_instant(event, tz)
        if instant is INVALID_INSTANT:
            return (1, 0, position)
        return (0, instant, position)

    return [event for _, event in sorted(enumerate(events), key=_key)]


def is_chronological(events: list, tz: Optional[tzinfo] = None) -> bool:
    """True when resolved instants never decrease (unresolved ones ignored)."""

    previous = None
    for event in events or []:
        instant = resolve_instant(event, tz)
        if instant is INVALID_INSTANT:
            continue
        if previous is not None and instant < previous:
            return False
        previous = instant
    return True
