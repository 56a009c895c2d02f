from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional


DEFAULT_API_URL = "http://mqtt.brilcom.com:8080/mqtt/GetAirQualityForChart"

_API_URL_ENV = "AIR_QUALITY_API_URL"
_API_TIMEOUT_ENV = "AIR_QUALITY_TIMEOUT"
_ALERT_POLICY_ENV = "REPORT_ALERT_POLICY"
_CHART_DIR_ENV = "REPORT_CHART_DIR"
_RENDER_WORKERS_ENV = "REPORT_RENDER_WORKERS"
_LOG_LEVEL_ENV = "LOG_LEVEL"


@dataclass(frozen=True)
class Settings:
    api_url: str
    api_timeout: float
    alert_policy: str
    chart_dir: Optional[str]
    render_workers: int
    log_level: str


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_optional_env(name: str, default: Optional[str]) -> Optional[str]:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or None


def _read_positive_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = int(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_positive_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = float(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(
        api_url=_read_str_env(_API_URL_ENV, DEFAULT_API_URL),
        api_timeout=_read_positive_float(_API_TIMEOUT_ENV, 30.0),
        alert_policy=_read_str_env(_ALERT_POLICY_ENV, "exceedance").lower(),
        chart_dir=_read_optional_env(_CHART_DIR_ENV, None),
        render_workers=_read_positive_int(_RENDER_WORKERS_ENV, 1),
        log_level=_read_log_level("INFO"),
    )
