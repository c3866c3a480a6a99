"""CSV adapter for stored log records."""

from __future__ import annotations

import csv
from typing import Any

from behavior_engine.adapters.records import parse_record
from behavior_engine.schema import Event

_REQUIRED_FIELDS = {"type", "value"}
_NUMERIC_FIELDS = ("id", "timestamp")


def _coerce_number(raw: Any) -> Any:
    if raw in (None, ""):
        return None
    text = str(raw).strip()
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return float(text)
    except ValueError:
        return text


def _parse_row(row: dict, row_number: int) -> Event:
    missing = [field for field in sorted(_REQUIRED_FIELDS) if not row.get(field)]
    if row.get("type") == "sensory" and row.get("category"):
        missing = [field for field in missing if field != "value"]
    if missing:
        raise ValueError(f"Row {row_number}: missing required fields {missing}")

    item = {key: (value if value != "" else None) for key, value in row.items() if key}
    for field in _NUMERIC_FIELDS:
        item[field] = _coerce_number(row.get(field))

    return parse_record(item, row_number, where="Row")


def parse(file_path: str) -> list[Event]:
    """Parse CSV file into events, in file order."""

    with open(file_path, newline="", encoding="utf-8") as handle:
        reader = csv.DictReader(handle)
        if not reader.fieldnames:
            return []

        events: list[Event] = []
        for row_number, row in enumerate(reader, start=2):
            events.append(_parse_row(row, row_number))
        return events
