"""Full analysis pass combining the engine and the aggregate reporters."""

from __future__ import annotations

import logging
from dataclasses import asdict
from datetime import tzinfo
from typing import Optional

from behavior_engine.aggregates import mood_distribution, quick_stats, sensory_breakdown, time_of_day_analysis
from behavior_engine.config import DEFAULT_CONFIG, AnalysisConfig
from behavior_engine.correlation import compute_correlations
from behavior_engine.patterns import detect_patterns
from behavior_engine.timestamps import is_chronological, now_ms, sort_events

logger = logging.getLogger(__name__)


def build_report(
    events: list,
    now: Optional[int] = None,
    config: AnalysisConfig = DEFAULT_CONFIG,
    tz: Optional[tzinfo] = None,
) -> dict:
    """Sort the events once, then run every analysis with a shared ``now``."""

    now = now_ms() if now is None else now
    events = events or []
    if not is_chronological(events, tz):
        logger.info("Events out of chronological order; sorting %d events", len(events))
        events = sort_events(events, tz)

    return {
        "now": now,
        "n_events": len(events),
        "correlations": [asdict(pair) for pair in compute_correlations(events, window_ms=config.window_ms, tz=tz)],
        "alerts": [asdict(alert) for alert in detect_patterns(events, now=now, config=config, tz=tz)],
        "mood_distribution": mood_distribution(events),
        "sensory_breakdown": sensory_breakdown(events),
        "time_of_day": time_of_day_analysis(events, tz=tz),
        "quick_stats": quick_stats(events, now=now, tz=tz),
    }
