"""Streamlit dashboard for behavior-engine."""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Any

from behavior_engine.adapters import csv_adapter, json_adapter
from behavior_engine.aggregates import mood_trends, moods_by_subject, sensory_intensity_heatmap
from behavior_engine.config import AnalysisConfig
from behavior_engine.insights import InsightsClient, InsightsError, request_insights
from behavior_engine.report import build_report
from behavior_engine.timestamps import now_ms, sort_events

DEMO_DATASET = "examples/sample_dataset.json"


def _parse_events_from_path(file_path: str) -> list:
    suffix = Path(file_path).suffix.lower()
    if suffix == ".csv":
        return csv_adapter.parse(file_path)
    if suffix == ".json":
        return json_adapter.parse(file_path)
    raise ValueError("Unsupported file type. Please use .csv or .json")


def _parse_uploaded(uploaded_file) -> list:
    suffix = Path(uploaded_file.name).suffix.lower()
    with tempfile.NamedTemporaryFile(delete=False, suffix=suffix) as handle:
        handle.write(uploaded_file.getbuffer())
        temp_path = handle.name
    return _parse_events_from_path(temp_path)


def _parse_schedule(text: str) -> list[dict]:
    """Parse ``09:00-10:00 Math`` lines into schedule periods."""

    periods = []
    for line_number, line in enumerate(text.splitlines(), start=1):
        line = line.strip()
        if not line:
            continue
        span, _, subject = line.partition(" ")
        start, _, end = span.partition("-")
        if not (start and end and subject.strip()):
            raise ValueError(f"Schedule line {line_number}: expected 'HH:MM-HH:MM Subject'")
        for clock in (start, end):
            hour, _, minute = clock.partition(":")
            if not (hour.isdigit() and minute.isdigit()):
                raise ValueError(f"Schedule line {line_number}: invalid time '{clock}'")
        periods.append({"start": start, "end": end, "subject": subject.strip()})
    return periods


def run_engine(events: list, config: AnalysisConfig, now: int, days: int = 7, schedule: list | None = None) -> dict[str, Any]:
    """Run all analysis steps and return a UI-friendly result payload."""

    ordered = sort_events(events)
    result = build_report(ordered, now=now, config=config)
    result["trends"] = mood_trends(ordered, days=days, now=now)
    result["heatmap"] = sensory_intensity_heatmap(ordered, days=days, now=now)
    result["by_subject"] = moods_by_subject(ordered, schedule or [])
    return result


def main() -> None:
    import streamlit as st

    st.set_page_config(page_title="Behavior Engine Dashboard", layout="wide")
    st.title("Behavior Engine — Streamlit Dashboard")

    with st.sidebar:
        st.header("Controls")
        uploaded = st.file_uploader("Upload log file", type=["csv", "json"])
        use_demo = st.checkbox("Load demo dataset", value=True)
        student_name = st.text_input("Student", value="Liam Carter")
        window_hours = st.slider("Window (hours)", min_value=1, max_value=12, value=2)
        distress = st.number_input("Acute distress threshold", min_value=1, max_value=20, value=3, step=1)
        overload = st.number_input("Sensory overload threshold", min_value=1, max_value=20, value=2, step=1)
        recurrence = st.number_input("Weekly recurrence threshold", min_value=1, max_value=20, value=3, step=1)
        days = st.slider("Trend days", min_value=1, max_value=30, value=7)
        schedule_text = st.text_area("Class schedule (one \"HH:MM-HH:MM Subject\" per line)", value="09:00-10:00 Math")
        run = st.button("Run analysis", type="primary")
        ask_ai = st.button("Get AI insights")

    if not (run or ask_ai):
        st.info("Configure inputs in the sidebar and click **Run analysis**.")
        return

    try:
        if use_demo:
            events = json_adapter.parse(DEMO_DATASET)
            data_source = f"demo dataset ({DEMO_DATASET})"
        elif uploaded is not None:
            events = _parse_uploaded(uploaded)
            data_source = f"uploaded file ({uploaded.name})"
        else:
            st.error("Please upload a CSV/JSON file or enable 'Load demo dataset'.")
            return

        if not events:
            st.error("No events were found in the selected input.")
            return

        config = AnalysisConfig(
            window_ms=int(window_hours) * 60 * 60 * 1000,
            distress_threshold=int(distress),
            overload_threshold=int(overload),
            recurrence_threshold=int(recurrence),
        )
        schedule = _parse_schedule(schedule_text)
        result = run_engine(events, config, now=now_ms(), days=int(days), schedule=schedule)

        st.success(f"Loaded {len(events)} events from {data_source}.")

        st.subheader("A) Quick Stats")
        stats = result["quick_stats"]
        c1, c2, c3, c4 = st.columns(4)
        c1.metric("Logs today", stats["today_total"])
        c2.metric("Moods today", stats["today_mood_count"])
        c3.metric("Most common mood today", stats["most_common_mood_today"])
        c4.metric("Logs this week", stats["week_total"])

        st.subheader("B) Pattern Alerts")
        if not result["alerts"]:
            st.write("No alerts.")
        for alert in result["alerts"]:
            if alert["severity"] == "warning":
                st.warning(alert["message"])
            else:
                st.info(alert["message"])

        st.subheader("C) Sensory → Mood Correlations")
        st.table(result["correlations"] or [{"stimulus_category": "-", "mood_label": "-", "occurrence_count": 0}])

        st.subheader("D) Charts")
        ch1, ch2 = st.columns(2)
        ch1.write("**Feelings breakdown**")
        ch1.bar_chart({row["name"]: row["value"] for row in result["mood_distribution"]})
        ch2.write("**Sensory input by intensity**")
        ch2.table(result["sensory_breakdown"])
        st.write("**Mood trends**")
        st.table([{key: value for key, value in row.items() if key != "full_date"} for row in result["trends"]])
        st.write("**Time of day**")
        st.table(result["time_of_day"])
        st.write("**Sensory intensity by day**")
        st.table(result["heatmap"])
        st.write("**Moods by subject**")
        if result["by_subject"]:
            st.table(result["by_subject"])
        else:
            st.write("No logs fall inside the schedule.")

        if ask_ai:
            st.subheader("E) AI Insights")
            with st.spinner("Analyzing student data..."):
                st.write(request_insights(student_name, events, InsightsClient.from_env()))

    except InsightsError as exc:
        st.error(f"Insights error: {exc}")
    except ValueError as exc:
        st.error(f"Input error: {exc}")
    except Exception:
        st.error("Something went wrong while running the analysis. Please verify the input format.")


if __name__ == "__main__":
    main()
