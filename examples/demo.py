"""Demo script for behavior-engine."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from behavior_engine.adapters.json_adapter import parse
from behavior_engine.correlation import compute_correlations
from behavior_engine.patterns import detect_patterns
from behavior_engine.timestamps import resolve_instant, sort_events


def main() -> None:
    events = sort_events(parse("examples/sample_dataset.json"))
    now = max(instant for instant in (resolve_instant(e) for e in events) if instant is not None)
    print("Correlations:")
    for pair in compute_correlations(events):
        print(f"  {pair.stimulus_category} -> {pair.mood_label}: {pair.occurrence_count}")
    print("Alerts:")
    for alert in detect_patterns(events, now=now):
        print(f"  [{alert.severity}] {alert.message}")


if __name__ == "__main__":
    main()
