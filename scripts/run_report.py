"""Compute the analytics dashboard for a JSON/CSV dataset and print it as JSON."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import datetime
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from task_analytics.adapters import csv_adapter, json_adapter
from task_analytics.clock import FixedClock, SystemClock
from task_analytics.config import load_config
from task_analytics.engine import AnalyticsEngine
from task_analytics.fallback import dashboard_or_fallback

logger = logging.getLogger("run_report")


def _load_source(args: argparse.Namespace):
    path = Path(args.data)
    suffix = path.suffix.lower()
    if suffix == ".json":
        return json_adapter.parse(str(path))
    if suffix == ".csv":
        if not args.history:
            raise ValueError("CSV input needs --history pointing at the history CSV")
        return csv_adapter.parse(str(path), args.history)
    raise ValueError("Unsupported input format, expected .csv or .json")


def main() -> None:
    parser = argparse.ArgumentParser(description="Compute task analytics for a dataset")
    parser.add_argument("--data", required=True, help="Path to JSON dataset or tasks CSV")
    parser.add_argument("--history", help="Path to history CSV (CSV input only)")
    parser.add_argument("--user", required=True, help="Caller user id")
    parser.add_argument("--scope", default="personal", choices=["personal", "global"])
    parser.add_argument("--days", type=int, default=None, help="Trailing period length in days")
    parser.add_argument("--now", help="ISO timestamp to evaluate at (default: current time)")
    parser.add_argument("--config", default="analytics.toml", help="Path to analytics.toml")
    parser.add_argument("--log-level", default="WARNING")
    parser.add_argument("--out", help="Also write the report to this file")
    args = parser.parse_args()

    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    config, warning = load_config(Path(args.config))
    if warning:
        logger.warning(warning)

    clock = FixedClock(datetime.fromisoformat(args.now)) if args.now else SystemClock()
    engine = AnalyticsEngine(_load_source(args), clock=clock, config=config)
    dashboard, degraded = dashboard_or_fallback(engine, args.user, args.scope, args.days)

    report = dashboard.to_dict()
    report["degraded"] = degraded
    print(json.dumps(report, indent=2))

    if args.out:
        out_path = Path(args.out)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(json.dumps(report, indent=2), encoding="utf-8")
        print(f"Saved analytics report to {out_path}")


if __name__ == "__main__":
    main()
