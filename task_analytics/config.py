"""Engine configuration loaded from an optional analytics.toml."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import tomllib
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


def _as_int(value, *, default: int) -> int:
    try:
        return int(value)
    except Exception:  # noqa: BLE001
        return int(default)


def _as_float(value, *, default: float) -> float:
    try:
        return float(value)
    except Exception:  # noqa: BLE001
        return float(default)


@dataclass(frozen=True)
class EngineConfig:
    timezone: str = "UTC"
    default_days: int = 7
    heatmap_days: int = 90
    efficiency_sample_limit: int = 30
    insight_limit: int = 4
    review_fallback_days: float = 0.5
    max_workers: int = 6
    query_timeout_seconds: float = 30.0

    def zone(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)


def _resolve_timezone(value) -> tuple[str, str]:
    name = str(value or EngineConfig.timezone).strip()
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return EngineConfig.timezone, f"unknown timezone {name!r}, using {EngineConfig.timezone}"
    return name, ""


def config_from_mapping(data: dict) -> tuple[EngineConfig, str]:
    """Build a config from a parsed [analytics] table, clamping bad values."""

    timezone, warning = _resolve_timezone(data.get("timezone"))
    cfg = EngineConfig(
        timezone=timezone,
        default_days=max(1, _as_int(data.get("default_days"), default=EngineConfig.default_days)),
        heatmap_days=max(1, _as_int(data.get("heatmap_days"), default=EngineConfig.heatmap_days)),
        efficiency_sample_limit=max(
            1, _as_int(data.get("efficiency_sample_limit"), default=EngineConfig.efficiency_sample_limit)
        ),
        insight_limit=max(0, _as_int(data.get("insight_limit"), default=EngineConfig.insight_limit)),
        review_fallback_days=max(
            0.0, _as_float(data.get("review_fallback_days"), default=EngineConfig.review_fallback_days)
        ),
        max_workers=max(1, _as_int(data.get("max_workers"), default=EngineConfig.max_workers)),
        query_timeout_seconds=max(
            0.1, _as_float(data.get("query_timeout_seconds"), default=EngineConfig.query_timeout_seconds)
        ),
    )
    return cfg, warning


def load_config(path: Path) -> tuple[EngineConfig, str]:
    """Load engine config from analytics.toml.

    Returns (config, warning). Warning is empty on success; a missing file is
    not an error.
    """

    if not path.exists():
        return EngineConfig(), ""

    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except Exception as exc:  # noqa: BLE001
        return EngineConfig(), f"{path.name} parse failed: {exc}"

    section = data.get("analytics") if isinstance(data.get("analytics"), dict) else {}
    return config_from_mapping(section)
