from datetime import timedelta, timezone

from behavior_engine.config import AnalysisConfig
from behavior_engine.patterns import detect_patterns
from behavior_engine.schema import Alert
from behavior_engine.timestamps import _MAX_INSTANT, _MIN_INSTANT
from helpers import DAY, HOUR, MONDAY, WEEK, mood, stimulus


def messages(alerts):
    return [alert.message for alert in alerts]


def test_high_stimulus_followed_by_negative_mood():
    events = [stimulus("Auditory", "High", 0), mood("Anxious", 3_600_000)]
    alerts = detect_patterns(events, now=3_600_000, tz=timezone.utc)
    assert alerts == [Alert("warning", "High Auditory input was followed by feeling Anxious", 3_600_000)]


def test_follow_up_past_window_produces_no_trigger():
    events = [stimulus("Auditory", "High", 0), mood("Anxious", 7_200_001)]
    assert detect_patterns(events, now=7_200_001, tz=timezone.utc) == []


def test_trigger_uses_first_negative_mood_only():
    events = [
        stimulus("Visual", "High", 0),
        mood("Happy", 10),
        mood("Angry", 20),
        mood("Anxious", 30),
    ]
    alerts = detect_patterns(events, now=100 * DAY, tz=timezone.utc)
    assert messages(alerts) == ["High Visual input was followed by feeling Angry"]


def test_trigger_requires_high_intensity():
    events = [stimulus("Visual", "Medium", 0), mood("Angry", 20)]
    assert detect_patterns(events, now=100 * DAY, tz=timezone.utc) == []


def test_acute_distress_fires_at_three():
    events = [mood("Angry", 0), mood("Angry", 1_000_000), mood("Angry", 2_000_000)]
    alerts = detect_patterns(events, now=2_000_000, tz=timezone.utc)
    assert alerts[0] == Alert("warning", "3 anxious/angry logs in the past 2 hours", 2_000_000)


def test_acute_distress_not_at_two():
    now = MONDAY + 10 * HOUR
    events = [mood("Anxious", now - HOUR), mood("Angry", now - 1000)]
    assert not any("anxious/angry" in message for message in messages(detect_patterns(events, now=now)))


def test_acute_distress_ignores_events_before_cutoff():
    now = MONDAY + 10 * HOUR
    events = [
        mood("Anxious", now - 3 * HOUR),
        mood("Anxious", now - 2 * HOUR),
        mood("Angry", now - HOUR),
        mood("Sad", now - 10),
    ]
    assert detect_patterns(events, now=now, tz=timezone.utc) == []


def test_sensory_overload_threshold():
    now = MONDAY + 10 * HOUR
    one = [stimulus("Visual", "High", now - HOUR)]
    two = one + [stimulus("Tactile", "High", now - 10)]
    assert detect_patterns(one, now=now, tz=timezone.utc) == []
    assert detect_patterns(two, now=now, tz=timezone.utc) == [
        Alert("info", "Multiple high sensory intensity logs detected", now)
    ]


def test_weekly_recurrence_across_whole_history():
    events = [mood("Happy", MONDAY + week * WEEK + 9 * HOUR) for week in range(6)]
    alerts = detect_patterns(events, now=MONDAY + 60 * WEEK, tz=timezone.utc)
    assert messages(alerts) == ["Student typically feels Happy on Mondays"]
    assert alerts[0].severity == "info"


def test_weekly_recurrence_discovery_order():
    tuesday = MONDAY + DAY
    events = []
    for week in range(3):
        base = week * WEEK
        events.append(mood("Sad", tuesday + base))
        events.append(mood("Happy", MONDAY + base + 2 * DAY + 7 * DAY))
        events.append(mood("Angry", tuesday + base + HOUR))
    alerts = detect_patterns(sorted(events, key=lambda e: e.timestamp), now=MONDAY + 100 * WEEK, tz=timezone.utc)
    assert messages(alerts) == [
        "Student typically feels Sad on Tuesdays",
        "Student typically feels Angry on Tuesdays",
        "Student typically feels Happy on Wednesdays",
    ]


def test_rules_are_concatenated_in_order_with_shared_now():
    t = MONDAY + 3 * WEEK + 9 * HOUR
    events = [
        mood("Happy", MONDAY),
        mood("Happy", MONDAY + WEEK),
        mood("Happy", MONDAY + 2 * WEEK),
        stimulus("Auditory", "High", t),
        stimulus("Visual", "High", t + 60_000),
        mood("Angry", t + 120_000),
        mood("Anxious", t + 180_000),
        mood("Angry", t + 240_000),
    ]
    now = t + 240_000
    alerts = detect_patterns(events, now=now, tz=timezone.utc)
    assert messages(alerts) == [
        "3 anxious/angry logs in the past 2 hours",
        "Multiple high sensory intensity logs detected",
        "Student typically feels Happy on Mondays",
        "High Auditory input was followed by feeling Angry",
        "High Visual input was followed by feeling Angry",
    ]
    assert [alert.severity for alert in alerts] == ["warning", "info", "info", "warning", "warning"]
    assert {alert.generated_at for alert in alerts} == {now}


def test_thresholds_are_configurable():
    now = MONDAY + 10 * HOUR
    events = [mood("Anxious", now - HOUR), mood("Angry", now - 1000)]
    config = AnalysisConfig(distress_threshold=2)
    alerts = detect_patterns(events, now=now, config=config, tz=timezone.utc)
    assert messages(alerts) == ["2 anxious/angry logs in the past 2 hours"]


def test_unresolved_events_never_alert():
    events = [mood("Angry", "bad"), mood("Angry", "bad"), mood("Angry", "bad"), stimulus("Visual", "High", "bad")]
    assert detect_patterns(events, now=MONDAY) == []


def test_empty_or_missing_sequence():
    assert detect_patterns([]) == []
    assert detect_patterns(None) == []


def test_trigger_window_upper_bound_is_inclusive():
    window = AnalysisConfig().window_ms
    at_edge = [stimulus("Tactile", "High", 0), mood("Angry", window)]
    past_edge = [stimulus("Tactile", "High", 0), mood("Angry", window + 1)]
    assert messages(detect_patterns(at_edge, now=100 * DAY, tz=timezone.utc)) == [
        "High Tactile input was followed by feeling Angry"
    ]
    assert detect_patterns(past_edge, now=100 * DAY, tz=timezone.utc) == []


def test_calendar_edge_instants_do_not_crash_the_pass():
    ahead = timezone(timedelta(hours=14))
    behind = timezone(timedelta(hours=-12))
    out_of_range = [mood("Happy", "9999-12-31T23:00:00-05:00"), mood("Happy", 253_402_300_799_999)]
    assert detect_patterns(out_of_range, now=0, tz=timezone.utc) == []
    assert detect_patterns(out_of_range, now=0, tz=timezone(timedelta(hours=1))) == []

    latest = [mood("Happy", _MAX_INSTANT) for _ in range(3)]
    alerts = detect_patterns(latest, now=0, tz=ahead)
    assert len(alerts) == 1
    assert alerts[0].message.startswith("Student typically feels Happy on ")

    earliest = [mood("Sad", _MIN_INSTANT) for _ in range(3)]
    assert len(detect_patterns(earliest, now=0, tz=behind)) == 1
