"""Run the correlation and pattern analysis on a CSV/JSON log file."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from behavior_engine.adapters import csv_adapter, json_adapter
from behavior_engine.config import AnalysisConfig
from behavior_engine.report import build_report


def _load_events(path: Path):
    suffix = path.suffix.lower()
    if suffix == ".csv":
        return csv_adapter.parse(str(path))
    if suffix == ".json":
        return json_adapter.parse(str(path))
    raise ValueError("Unsupported input format, expected .csv or .json")


def main() -> None:
    parser = argparse.ArgumentParser(description="Run behavior-engine analysis")
    parser.add_argument("--data", required=True, help="Path to CSV/JSON log file")
    parser.add_argument("--now", type=int, default=None, help="Analysis instant in epoch ms (default: current time)")
    parser.add_argument("--log-level", default="WARNING", help="Logging level")
    args = parser.parse_args()

    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(name)s %(levelname)s %(message)s")

    events = _load_events(Path(args.data))
    report = build_report(events, now=args.now, config=AnalysisConfig.from_env())

    print(json.dumps(report, indent=2))

    outputs_dir = Path("outputs")
    outputs_dir.mkdir(parents=True, exist_ok=True)
    out_path = outputs_dir / "analysis_report.json"
    out_path.write_text(json.dumps(report, indent=2), encoding="utf-8")
    print(f"Saved analysis report to {out_path}")


if __name__ == "__main__":
    main()
