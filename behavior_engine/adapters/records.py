"""Conversion between persisted log records and events."""

from __future__ import annotations

from typing import Any, Optional

from behavior_engine.schema import INTENSITIES, MOODS, Event, MoodEvent, StimulusEvent

_VALID_TYPES = {"feeling", "sensory"}


def _note(item: dict) -> Optional[str]:
    for key in ("notes", "description"):
        value = item.get(key)
        if value:
            return str(value).strip()
    return None


def _split_legacy(value: Any) -> tuple[Optional[str], Optional[str]]:
    """Split a legacy ``"Visual - High"`` value into category and intensity."""

    if not isinstance(value, str) or " - " not in value:
        return None, None
    category, level = value.split(" - ", maxsplit=1)
    return category.strip(), level.strip()


def parse_record(item: dict, index: int, where: str = "Item") -> Event:
    """Parse one stored record into an event; time fields are kept raw."""

    if not isinstance(item, dict):
        raise ValueError(f"{where} {index}: record must be an object")

    kind = str(item.get("type") or "").strip()
    if kind not in _VALID_TYPES:
        raise ValueError(f"{where} {index}: invalid type '{kind}'")

    timestamp = item.get("timestamp")
    record_id = item.get("id")
    note = _note(item)

    if kind == "feeling":
        label = str(item.get("value") or "").strip()
        if label not in MOODS:
            raise ValueError(f"{where} {index}: invalid mood '{label}'")
        return MoodEvent(label=label, timestamp=timestamp, record_id=record_id, note=note)

    category = item.get("category")
    level = item.get("intensity")
    if not category:
        category, legacy_level = _split_legacy(item.get("sensory") or item.get("value"))
        level = level or legacy_level
    if not category:
        raise ValueError(f"{where} {index}: missing sensory category")

    level = str(level).strip() if level else ""
    if level not in INTENSITIES:
        raise ValueError(f"{where} {index}: invalid intensity '{level}'")

    return StimulusEvent(
        category=str(category).strip(),
        intensity=level,
        timestamp=timestamp,
        record_id=record_id,
        note=note,
    )


def parse_records(payload: list) -> list[Event]:
    return [parse_record(item, i) for i, item in enumerate(payload, start=1)]


def to_record(event: Event) -> dict:
    """Serialize an event back to the stored record shape."""

    record: dict[str, Any] = {"id": event.record_id, "timestamp": event.timestamp}
    if event.kind == "mood":
        record.update(type="feeling", value=event.label)
    else:
        record.update(type="sensory", category=event.category, intensity=event.intensity)
    if event.note:
        record["notes"] = event.note
    return record
