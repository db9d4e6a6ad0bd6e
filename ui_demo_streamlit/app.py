"""Streamlit demo UI for task-analytics."""

from __future__ import annotations

import tempfile
from datetime import datetime, time, timezone
from pathlib import Path
from typing import Any

from task_analytics.adapters import json_adapter
from task_analytics.clock import FixedClock
from task_analytics.config import config_from_mapping
from task_analytics.engine import AnalyticsEngine
from task_analytics.fallback import dashboard_or_fallback
from task_analytics.heatmap import heatmap_points
from task_analytics.source import InMemoryEventSource

DEMO_DATASET = "examples/sample_dataset.json"


def _parse_uploaded(uploaded_file) -> InMemoryEventSource:
    suffix = Path(uploaded_file.name).suffix.lower()
    if suffix != ".json":
        raise ValueError("Unsupported file type. Please use a .json dataset")
    with tempfile.NamedTemporaryFile(delete=False, suffix=suffix) as handle:
        handle.write(uploaded_file.getbuffer())
        temp_path = handle.name
    return json_adapter.parse(temp_path)


def run_engine(source: InMemoryEventSource, params: dict) -> dict[str, Any]:
    """Run the dashboard and return a UI-friendly result payload."""

    config, config_warning = config_from_mapping({"timezone": params["timezone"]})
    engine = AnalyticsEngine(source, clock=FixedClock(params["now"]), config=config)
    dashboard, degraded = dashboard_or_fallback(engine, params["user"], params["scope"], params["days"])
    return {
        "dashboard": dashboard,
        "degraded": degraded,
        "config_warning": config_warning,
        "heatmap_points": [point.to_dict() for point in heatmap_points(dashboard.heatmap)],
    }


def main() -> None:
    import streamlit as st

    st.set_page_config(page_title="Task Analytics Demo", layout="wide")
    st.title("Task Analytics: Streamlit Demo")

    with st.sidebar:
        st.header("Controls")
        uploaded = st.file_uploader("Upload dataset", type=["json"])
        use_demo = st.checkbox("Load demo dataset", value=True)
        user = st.text_input("User id", value="alice")
        scope = st.selectbox("Scope", options=["personal", "global"], index=0)
        days = st.slider("Period (days)", min_value=1, max_value=30, value=7)
        tz_name = st.text_input("Timezone", value="UTC")
        as_of_day = st.date_input("Evaluate at", value=datetime(2025, 1, 15).date())
        run = st.button("Run engine", type="primary")

    if not run:
        st.info("Configure inputs in the sidebar and click **Run engine**.")
        return

    try:
        if use_demo:
            source = json_adapter.parse(DEMO_DATASET)
            data_source = f"demo dataset ({DEMO_DATASET})"
        elif uploaded is not None:
            source = _parse_uploaded(uploaded)
            data_source = f"uploaded file ({uploaded.name})"
        else:
            st.error("Please upload a JSON dataset or enable 'Load demo dataset'.")
            return

        params = {
            "user": user.strip(),
            "scope": scope,
            "days": int(days),
            "timezone": tz_name.strip() or "UTC",
            "now": datetime.combine(as_of_day, time(23, 59), tzinfo=timezone.utc),
        }
        result = run_engine(source, params)
        dashboard = result["dashboard"]

        st.success(f"Loaded {len(source.tasks)} tasks and {len(source.history)} events from {data_source}.")
        if result["config_warning"]:
            st.warning(result["config_warning"])
        if result["degraded"]:
            st.warning("Analytics store unavailable; showing a zeroed baseline.")

        st.subheader("A) Productivity")
        productivity = dashboard.productivity
        c1, c2, c3, c4 = st.columns(4)
        c1.metric("Completed", productivity.completed_this_period, f"{productivity.throughput_trend_pct}%")
        c2.metric("Avg lead time (days)", productivity.avg_lead_time_days, f"{productivity.lead_time_trend_pct}%")
        c3.metric("Performance score", productivity.performance_score, f"{productivity.productivity_trend_pct}%")
        c4.metric("Active tasks", dashboard.priorities.total)

        st.subheader("B) Trends")
        st.table([point.to_dict() for point in dashboard.trends])

        st.subheader("C) Priority distribution")
        st.table([dashboard.priorities.to_dict()])

        st.subheader("D) Time in status")
        st.table([row.to_dict() for row in dashboard.efficiency])

        st.subheader("E) Activity heatmap")
        if result["heatmap_points"]:
            st.table(result["heatmap_points"])
        else:
            st.write("No completions in the last 90 days.")

        st.subheader("F) Insights")
        for insight in dashboard.insights or ["No insights for this period."]:
            st.write(f"- {insight}")

    except ValueError as exc:
        st.error(f"Input error: {exc}")


if __name__ == "__main__":
    main()
