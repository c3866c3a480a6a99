"""Aggregate reports consumed by the dashboard charts."""

from __future__ import annotations

from collections import Counter
from datetime import date, datetime, timedelta, tzinfo
from typing import Optional

from behavior_engine.classify import is_mood, is_stimulus
from behavior_engine.schema import CORE_SENSORY_CATEGORIES, INTENSITIES, SENSORY_CATEGORIES
from behavior_engine.timestamps import is_valid_instant, now_ms, resolve_instant, to_datetime

INTENSITY_SCORES = {"Low": 1, "Medium": 2, "High": 3}

MOOD_COLORS = {
    "Happy": "#10b981",
    "Sad": "#8b5cf6",
    "Angry": "#ef4444",
    "Anxious": "#f59e0b",
}
SENSORY_COLORS = {
    "Visual": "#3b82f6",
    "Auditory": "#ec4899",
    "Tactile": "#14b8a6",
}
DEFAULT_COLOR = "#6b7280"


def mood_color(mood: str) -> str:
    return MOOD_COLORS.get(mood, DEFAULT_COLOR)


def sensory_color(category: str) -> str:
    return SENSORY_COLORS.get(category, DEFAULT_COLOR)


def _timed(events: Optional[list], tz: Optional[tzinfo]) -> list[tuple[object, datetime]]:
    """Pair each event with its local datetime, dropping unresolvable ones."""

    timed = []
    for event in events or []:
        instant = resolve_instant(event, tz)
        if is_valid_instant(instant):
            timed.append((event, to_datetime(instant, tz)))
    return timed


def _day_label(day: date) -> str:
    return f"{day:%b} {day.day}"


def _hour_label(hour: int) -> str:
    suffix = "AM" if hour < 12 else "PM"
    return f"{hour % 12 or 12}{suffix}"


def _mood_counts(events) -> dict[str, int]:
    return dict(Counter(event.label for event in events if is_mood(event) and event.label))


def _today(now: Optional[int], tz: Optional[tzinfo]) -> datetime:
    return to_datetime(now_ms() if now is None else now, tz)


def mood_distribution(events: Optional[list]) -> list[dict]:
    """Share of each mood label, in first-occurrence order."""

    counts = _mood_counts(events or [])
    total = sum(counts.values())
    return [
        {"name": mood, "value": count, "percentage": f"{count / total * 100:.1f}"}
        for mood, count in counts.items()
    ]


def feelings_breakdown(events: Optional[list]) -> list[dict]:
    counts = _mood_counts(events or [])
    rows = [{"name": mood, "value": count} for mood, count in counts.items()]
    return sorted(rows, key=lambda row: row["value"], reverse=True)


def sensory_breakdown(events: Optional[list]) -> list[dict]:
    """Low/Medium/High counts per sensory category, empty categories dropped."""

    levels = {category: {level: 0 for level in INTENSITIES} for category in SENSORY_CATEGORIES}
    for event in events or []:
        if is_stimulus(event) and event.category in levels and event.intensity in INTENSITIES:
            levels[event.category][event.intensity] += 1

    return [{"name": category, **counts} for category, counts in levels.items() if any(counts.values())]


def mood_trends(
    events: Optional[list],
    days: int = 7,
    now: Optional[int] = None,
    tz: Optional[tzinfo] = None,
) -> list[dict]:
    """Mood counts per calendar day for the ``days`` days ending today."""

    if events is None:
        return []

    today = _today(now, tz).date()
    by_day: dict[date, list] = {}
    for event, moment in _timed(events, tz):
        if is_mood(event):
            by_day.setdefault(moment.date(), []).append(event)

    rows = []
    for offset in range(days - 1, -1, -1):
        day = today - timedelta(days=offset)
        day_events = by_day.get(day, [])
        rows.append({"date": _day_label(day), "full_date": day, **_mood_counts(day_events), "total": len(day_events)})
    return rows


def time_of_day_analysis(events: Optional[list], tz: Optional[tzinfo] = None) -> list[dict]:
    """Mood counts per hour of day, hours without moods omitted."""

    by_hour: dict[int, list] = {}
    for event, moment in _timed(events, tz):
        if is_mood(event):
            by_hour.setdefault(moment.hour, []).append(event)

    return [
        {"hour": _hour_label(hour), "hour_num": hour, **_mood_counts(by_hour[hour]), "total": len(by_hour[hour])}
        for hour in range(24)
        if hour in by_hour
    ]


def sensory_intensity_heatmap(
    events: Optional[list],
    days: int = 7,
    now: Optional[int] = None,
    tz: Optional[tzinfo] = None,
) -> list[dict]:
    """Mean intensity (Low=1, Medium=2, High=3) per day and core category."""

    if events is None:
        return []

    today = _today(now, tz).date()
    cells: dict[tuple[date, str], list[int]] = {}
    for event, moment in _timed(events, tz):
        if is_stimulus(event) and event.category:
            cells.setdefault((moment.date(), event.category), []).append(INTENSITY_SCORES.get(event.intensity, 0))

    heatmap = []
    for offset in range(days - 1, -1, -1):
        day = today - timedelta(days=offset)
        for category in CORE_SENSORY_CATEGORIES:
            scores = cells.get((day, category), [])
            heatmap.append(
                {
                    "date": _day_label(day),
                    "category": category,
                    "intensity": sum(scores) / len(scores) if scores else 0.0,
                    "count": len(scores),
                }
            )
    return heatmap


def quick_stats(events: Optional[list], now: Optional[int] = None, tz: Optional[tzinfo] = None) -> dict:
    """Today and this-week counts; weeks start on Sunday."""

    current = _today(now, tz)
    today_start = current.replace(hour=0, minute=0, second=0, microsecond=0)
    week_start = today_start - timedelta(days=(current.weekday() + 1) % 7)

    timed = _timed(events, tz)
    today_events = [event for event, moment in timed if moment >= today_start]
    week_events = [event for event, moment in timed if moment >= week_start]

    today_moods = _mood_counts(today_events)
    most_common = max(today_moods.items(), key=lambda item: item[1])[0] if today_moods else "None"

    return {
        "today_total": len(today_events),
        "today_mood_count": sum(today_moods.values()),
        "today_sensory_count": sum(1 for event in today_events if is_stimulus(event)),
        "most_common_mood_today": most_common,
        "week_total": len(week_events),
        "week_mood_breakdown": _mood_counts(week_events),
    }


def filter_by_date_range(events: Optional[list], start: int, end: int, tz: Optional[tzinfo] = None) -> list:
    """Events whose instant lies in ``[start, end]`` (epoch ms)."""

    kept = []
    for event in events or []:
        instant = resolve_instant(event, tz)
        if is_valid_instant(instant) and start <= instant <= end:
            kept.append(event)
    return kept


def _minutes(clock: str) -> int:
    hour, minute = clock.split(":")
    return int(hour) * 60 + int(minute)


def moods_by_subject(events: Optional[list], schedule: Optional[list[dict]], tz: Optional[tzinfo] = None) -> list[dict]:
    """Mood counts per scheduled subject, matched on time of day.

    A period ``{"start": "09:00", "end": "10:00", "subject": "Math"}`` covers
    ``[start, end)``. Subjects appear in first-match order.
    """

    if not schedule:
        return []

    periods = [(_minutes(period["start"]), _minutes(period["end"]), period["subject"]) for period in schedule]
    by_subject: dict[str, dict[str, int]] = {}
    for event, moment in _timed(events, tz):
        minute_of_day = moment.hour * 60 + moment.minute
        for start, end, subject in periods:
            if start <= minute_of_day < end:
                moods = by_subject.setdefault(subject, {})
                if is_mood(event):
                    moods[event.label] = moods.get(event.label, 0) + 1

    return [{"name": subject, **moods} for subject, moods in by_subject.items()]
