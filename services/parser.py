"""Conversion of raw text readings into typed samples."""

from __future__ import annotations

import math
import re
from datetime import datetime

import numpy as np

from models.records import METRIC_INFO, Metric, Sample
from models.schemas import RawSample
from services.errors import ParseError

REPORT_TIME_FORMAT = "%Y-%m-%dT%H:%M:%S"

# ASCII decimal text, or the inf/nan words.
_DECIMAL = re.compile(
    r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|[+-]?(?:inf|infinity|nan)",
    re.IGNORECASE | re.ASCII,
)

_RAW_ATTRIBUTES = {
    Metric.co2: "co2",
    Metric.voc: "tvoc",
    Metric.pm10: "pm10",
    Metric.pm25: "pm25",
    Metric.temperature: "temperature",
    Metric.humidity: "humidity",
}


def parse_timestamp(value: str) -> datetime:
    try:
        return datetime.strptime(value, REPORT_TIME_FORMAT)
    except ValueError as exc:
        raise ParseError("ReportTime", value, reason="invalid timestamp") from exc


def parse_float32(field: str, value: str) -> float:
    """Parse decimal text and round it to single precision."""
    if _DECIMAL.fullmatch(value) is None:
        raise ParseError(field, value, reason="invalid numeric value")
    try:
        parsed = float(value)
    except ValueError as exc:
        raise ParseError(field, value, reason="invalid numeric value") from exc

    with np.errstate(over="ignore"):
        rounded = float(np.float32(parsed))
    if math.isinf(rounded) and not math.isinf(parsed):
        raise ParseError(field, value, reason="value out of range")
    return rounded


def parse_sample(raw: RawSample) -> Sample:
    """Build a :class:`Sample` from one raw reading, failing on the first bad field."""
    timestamp = parse_timestamp(raw.report_time)
    values = {
        metric.value: parse_float32(
            METRIC_INFO[metric].source_field, getattr(raw, _RAW_ATTRIBUTES[metric])
        )
        for metric in Metric
    }
    return Sample(timestamp=timestamp, **values)
