"""JSON adapter for stored log records."""

from __future__ import annotations

import json

from behavior_engine.adapters.records import parse_records
from behavior_engine.schema import Event


def parse(file_path: str) -> list[Event]:
    """Parse a JSON array of log records into events, in file order."""

    with open(file_path, encoding="utf-8") as handle:
        try:
            payload = json.load(handle)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Malformed JSON in {file_path}") from exc

    if not isinstance(payload, list):
        raise ValueError("JSON payload must be a list of objects")

    return parse_records(payload)
