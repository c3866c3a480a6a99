"""JSON file key-value store for the student roster."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from behavior_engine.schema import MoodEvent, StimulusEvent
from behavior_engine.students import Student

logger = logging.getLogger(__name__)

STUDENTS_KEY = "students"


def demo_students() -> list[Student]:
    """Roster used when nothing has been saved yet."""

    return [
        Student(
            id=1,
            name="Liam Carter",
            logs=[
                MoodEvent("Happy", timestamp="10:30 AM", record_id=1720862400000),
                StimulusEvent("Visual", "Low", timestamp="09:15 AM", record_id=1720858500000, note="Dimmed the lights"),
                MoodEvent("Anxious", timestamp="Yesterday", record_id=1720776000000, note="Loud noise from outside"),
                StimulusEvent(
                    "Tactile", "High", timestamp="Yesterday", record_id=1720775000000, note="Used weighted blanket"
                ),
                MoodEvent("Sad", timestamp="2 days ago", record_id=1720689600000, note="Missed a friend"),
            ],
        ),
        Student(id=2, name="Olivia Bennett"),
        Student(id=3, name="Noah Thompson"),
        Student(id=4, name="Ava Rodriguez"),
        Student(id=5, name="Ethan Walker"),
    ]


class JsonStore:
    """Opaque key-value storage backed by a single JSON file."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def _read_all(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        payload = json.loads(self.path.read_text(encoding="utf-8"))
        if not isinstance(payload, dict):
            raise ValueError(f"{self.path} must contain a JSON object")
        return payload

    def get(self, key: str, default: Any = None) -> Any:
        return self._read_all().get(key, default)

    def set(self, key: str, value: Any) -> None:
        try:
            payload = self._read_all()
        except ValueError:
            backup = self.path.with_name(self.path.name + ".bak")
            self.path.replace(backup)
            logger.warning("Moved unreadable store %s to %s", self.path, backup)
            payload = {}
        payload[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(payload, indent=2), encoding="utf-8")


def load_students(store: JsonStore) -> list[Student]:
    """Load the roster, falling back to demo data when missing or unreadable.

    A malformed student entry is skipped; malformed logs are skipped by
    ``Student.from_dict``. Neither replaces the rest of the roster.
    """

    try:
        saved = store.get(STUDENTS_KEY)
    except ValueError as exc:
        logger.error("Error loading saved data from %s: %s", store.path, exc)
        return demo_students()
    if saved is None:
        return demo_students()
    if not isinstance(saved, list):
        logger.error("Error loading saved data from %s: roster must be a list", store.path)
        return demo_students()

    students = []
    for position, item in enumerate(saved, start=1):
        try:
            students.append(Student.from_dict(item))
        except (KeyError, TypeError, AttributeError) as exc:
            logger.warning("Skipping stored student %d in %s: %r", position, store.path, exc)
    return students


def save_students(store: JsonStore, students: list[Student]) -> None:
    store.set(STUDENTS_KEY, [student.to_dict() for student in students])
    logger.info("Saved %d students to %s", len(students), store.path)
