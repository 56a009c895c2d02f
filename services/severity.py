"""Severity bands used to colour plotted readings."""

from __future__ import annotations

from enum import Enum
from functools import partial
from typing import Callable, Dict, Tuple, Union

from models.records import Metric


class SeverityBand(str, Enum):
    low = "low"
    moderate = "moderate"
    elevated = "elevated"
    severe = "severe"


# Ascending upper bounds; a value below a bound falls in that band, anything
# above the last bound is severe.
_THRESHOLDS: Dict[Metric, Tuple[Tuple[float, SeverityBand], ...]] = {
    Metric.pm25: (
        (15, SeverityBand.low),
        (35, SeverityBand.moderate),
        (75, SeverityBand.elevated),
    ),
    Metric.pm10: (
        (30, SeverityBand.low),
        (80, SeverityBand.moderate),
        (150, SeverityBand.elevated),
    ),
    Metric.voc: (
        (249, SeverityBand.low),
        (449, SeverityBand.moderate),
    ),
    Metric.co2: (
        (800, SeverityBand.low),
        (1000, SeverityBand.moderate),
        (2000, SeverityBand.elevated),
    ),
}

BAND_COLORS: Dict[SeverityBand, str] = {
    SeverityBand.low: "blue",
    SeverityBand.moderate: "green",
    SeverityBand.elevated: "orange",
    SeverityBand.severe: "red",
}

FIXED_COLOR = "black"

_ALIASES = {"pm2.5": Metric.pm25, "tvoc": Metric.voc}


def _resolve(metric: Union[Metric, str]) -> Metric:
    if isinstance(metric, Metric):
        return metric
    key = metric.strip().lower()
    if key in _ALIASES:
        return _ALIASES[key]
    try:
        return Metric(key)
    except ValueError as exc:
        raise ValueError(f"Unknown metric {metric!r}") from exc


def has_severity(metric: Union[Metric, str]) -> bool:
    return _resolve(metric) in _THRESHOLDS


def severity(metric: Union[Metric, str], value: float) -> SeverityBand:
    resolved = _resolve(metric)
    thresholds = _THRESHOLDS.get(resolved)
    if thresholds is None:
        raise ValueError(f"Metric {resolved.value!r} has no severity bands")
    for upper, band in thresholds:
        if value < upper:
            return band
    return SeverityBand.severe


def severity_color(metric: Union[Metric, str], value: float) -> str:
    return BAND_COLORS[severity(metric, value)]


def color_mapper(metric: Union[Metric, str]) -> Union[str, Callable[[float], str]]:
    """Marker colour source for a metric: a per-value mapper, or the fixed colour."""
    resolved = _resolve(metric)
    if resolved not in _THRESHOLDS:
        return FIXED_COLOR
    return partial(severity_color, resolved)
