from behavior_engine.schema import MoodEvent, StimulusEvent

HOUR = 60 * 60 * 1000
DAY = 24 * HOUR
WEEK = 7 * DAY

# 2025-01-06T00:00:00Z, a Monday
MONDAY = 1736121600000


def mood(label, t, **kwargs):
    return MoodEvent(label, timestamp=t, **kwargs)


def stimulus(category, level, t, **kwargs):
    return StimulusEvent(category, level, timestamp=t, **kwargs)
