"""Demo script for task-analytics."""

import sys
from datetime import datetime, timezone
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from task_analytics.adapters.json_adapter import parse
from task_analytics.clock import FixedClock
from task_analytics.engine import AnalyticsEngine


def main() -> None:
    source = parse(str(Path(__file__).with_name("sample_dataset.json")))
    engine = AnalyticsEngine(source, clock=FixedClock(datetime(2025, 1, 15, 18, 0, tzinfo=timezone.utc)))
    for scope in ("personal", "global"):
        dashboard = engine.dashboard("alice", scope, days=7)
        print(f"[{scope}]")
        print("Trends:", [(p.date_label, p.completed_count, p.created_count) for p in dashboard.trends])
        print("Priorities:", dashboard.priorities)
        print("Productivity:", dashboard.productivity)
        print("Efficiency:", dashboard.efficiency)
        print("Heatmap:", dashboard.heatmap)
        print("Insights:", dashboard.insights)


if __name__ == "__main__":
    main()
