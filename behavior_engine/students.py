"""Student roster and per-student log management."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field, replace
from datetime import tzinfo
from typing import Any, Optional

from behavior_engine.adapters.records import parse_record, to_record
from behavior_engine.schema import Event
from behavior_engine.timestamps import sort_events

logger = logging.getLogger(__name__)


@dataclass
class Student:
    """A named student owning a newest-first log list and a class schedule."""

    id: Any
    name: str
    logs: list[Event] = field(default_factory=list)
    schedule: list[dict] = field(default_factory=list)

    def timeline(self, tz: Optional[tzinfo] = None) -> list[Event]:
        """Logs in chronological order, ready for the analysis engine."""

        return sort_events(self.logs, tz)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "logs": [to_record(event) for event in self.logs],
            "schedule": list(self.schedule),
        }

    @classmethod
    def from_dict(cls, payload: dict) -> "Student":
        """Build a student from its stored shape, skipping unreadable logs."""

        student_id = payload["id"]
        logs = []
        for position, item in enumerate(payload.get("logs") or [], start=1):
            try:
                logs.append(parse_record(item, position, where=f"Student {student_id!r} log"))
            except ValueError as exc:
                logger.warning("Skipping stored record: %s", exc)

        return cls(
            id=student_id,
            name=str(payload["name"]),
            logs=logs,
            schedule=list(payload.get("schedule") or []),
        )


def find_student(students: list[Student], student_id: Any) -> Optional[Student]:
    return next((student for student in students if student.id == student_id), None)


def _require(students: list[Student], student_id: Any) -> Student:
    student = find_student(students, student_id)
    if student is None:
        raise KeyError(f"Unknown student {student_id!r}")
    return student


def add_student(students: list[Student], name: str, student_id: Any = None) -> Student:
    name = name.strip()
    if not name:
        raise ValueError("Student name must not be empty")
    student = Student(id=student_id if student_id is not None else int(time.time() * 1000), name=name)
    students.append(student)
    return student


def add_log(students: list[Student], student_id: Any, event: Event) -> None:
    """Prepend a new log; lists are kept newest first."""

    student = _require(students, student_id)
    student.logs.insert(0, event)


def delete_log(students: list[Student], student_id: Any, record_id: Any) -> bool:
    student = _require(students, student_id)
    kept = [event for event in student.logs if event.record_id != record_id]
    removed = len(kept) != len(student.logs)
    student.logs = kept
    return removed


def edit_log(students: list[Student], student_id: Any, record_id: Any, **changes: Any) -> Event:
    """Replace fields of a log in place, keeping its identity and time."""

    for protected in ("record_id", "timestamp"):
        changes.pop(protected, None)

    student = _require(students, student_id)
    for position, event in enumerate(student.logs):
        if event.record_id == record_id:
            updated = replace(event, **changes)
            student.logs[position] = updated
            return updated
    raise KeyError(f"Unknown log {record_id!r} for student {student_id!r}")
