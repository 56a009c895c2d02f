"""Alert text policies built from batch extrema."""

from __future__ import annotations

from typing import Dict, Protocol, Tuple

from models.records import METRIC_INFO, Metric
from services.aggregator import Extrema

_BOLD_OFFSETS = (
    ("A", "Z", 0x1D400),
    ("a", "z", 0x1D41A),
    ("0", "9", 0x1D7CE),
)


def bold(text: str) -> str:
    """Map ASCII letters and digits onto the Unicode mathematical bold block.

    Messengers without markup support still show the result as bold text.
    Every other character is left untouched.
    """
    chars = []
    for char in text:
        for first, last, base in _BOLD_OFFSETS:
            if first <= char <= last:
                chars.append(chr(base + ord(char) - ord(first)))
                break
        else:
            chars.append(char)
    return "".join(chars)


class AlertComposer(Protocol):
    def compose(self, extrema: Extrema) -> str:
        ...


class ExceedancePolicy:
    """Report each metric whose peak went above its limit, with the time of the peak."""

    thresholds: Tuple[Tuple[Metric, float], ...] = (
        (Metric.co2, 800),
        (Metric.pm25, 15),
        (Metric.pm10, 30),
        (Metric.voc, 250),
    )

    def compose(self, extrema: Extrema) -> str:
        clauses = []
        for metric, limit in self.thresholds:
            peak = extrema[metric]
            if peak.maximum <= limit or peak.maximum_at is None:
                continue
            info = METRIC_INFO[metric]
            level = bold(f"high ({peak.maximum:.1f} {info.unit})")
            clauses.append(
                f"{info.title} level {level} at {peak.maximum_at:%H:%M} "
                f"(limit {limit:g} {info.unit})"
            )
        return " ".join(clauses)


class RangePolicy:
    """Always summarise the observed min-max range of the tracked metrics."""

    metrics: Tuple[Metric, ...] = (Metric.co2, Metric.voc, Metric.pm10, Metric.pm25)

    def compose(self, extrema: Extrema) -> str:
        if extrema.sample_count == 0:
            return ""
        parts = []
        for metric in self.metrics:
            info = METRIC_INFO[metric]
            parts.append(
                f"{info.title} {extrema.minimum(metric):.1f}-{extrema.maximum(metric):.1f} {info.unit}"
            )
        return f"Range: {', '.join(parts)}."


ALERT_POLICIES: Dict[str, type] = {
    "exceedance": ExceedancePolicy,
    "range": RangePolicy,
}


def build_alert_composer(name: str) -> AlertComposer:
    key = name.strip().lower()
    policy = ALERT_POLICIES.get(key)
    if policy is None:
        choices = ", ".join(sorted(ALERT_POLICIES))
        raise ValueError(f"Unknown alert policy {name!r}; expected one of: {choices}")
    return policy()
