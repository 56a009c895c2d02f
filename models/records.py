"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Dict, Tuple


class Metric(str, Enum):
    """The six readings reported by an air quality sensor."""

    co2 = "co2"
    voc = "voc"
    pm10 = "pm10"
    pm25 = "pm25"
    temperature = "temperature"
    humidity = "humidity"


@dataclass(frozen=True)
class MetricInfo:
    title: str
    unit: str
    source_field: str


METRIC_INFO: Dict[Metric, MetricInfo] = {
    Metric.co2: MetricInfo(title="CO₂", unit="ppm", source_field="Co2"),
    Metric.voc: MetricInfo(title="VOC", unit="ppb", source_field="Tvoc"),
    Metric.pm10: MetricInfo(title="PM10", unit="µg/m³", source_field="Pm10"),
    Metric.pm25: MetricInfo(title="PM2.5", unit="µg/m³", source_field="Pm25"),
    Metric.temperature: MetricInfo(title="Temperature", unit="°C", source_field="Temperature"),
    Metric.humidity: MetricInfo(title="Humidity", unit="%", source_field="Humidity"),
}

# Metrics with extrema tracking and severity bands.
TRACKED_METRICS: Tuple[Metric, ...] = (Metric.co2, Metric.voc, Metric.pm10, Metric.pm25)

# Order in which charts are rendered and delivered.
CHART_ORDER: Tuple[Metric, ...] = (
    Metric.pm25,
    Metric.pm10,
    Metric.voc,
    Metric.co2,
    Metric.temperature,
    Metric.humidity,
)


@dataclass(slots=True)
class Sample:
    """A single fully parsed reading."""

    timestamp: datetime
    co2: float
    voc: float
    pm10: float
    pm25: float
    temperature: float
    humidity: float

    def value(self, metric: Metric) -> float:
        return getattr(self, metric.value)
