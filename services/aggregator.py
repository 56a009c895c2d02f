"""Aggregation logic for air quality readings."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterable, List, Optional

import numpy as np

from models.records import TRACKED_METRICS, Metric, Sample
from models.schemas import RawSample
from services.errors import ParseError
from services.parser import parse_sample

MAX_SENTINEL = float(np.finfo(np.float32).smallest_subnormal)
MIN_SENTINEL = float(np.finfo(np.float32).max)


@dataclass
class SeriesSet:
    """Six metric series aligned by index to one timestamp axis."""

    timestamps: List[datetime] = field(default_factory=list)
    co2: List[float] = field(default_factory=list)
    voc: List[float] = field(default_factory=list)
    pm10: List[float] = field(default_factory=list)
    pm25: List[float] = field(default_factory=list)
    temperature: List[float] = field(default_factory=list)
    humidity: List[float] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.timestamps)

    def values(self, metric: Metric) -> List[float]:
        return getattr(self, metric.value)

    def append(self, sample: Sample) -> None:
        self.timestamps.append(sample.timestamp)
        for metric in Metric:
            self.values(metric).append(sample.value(metric))


@dataclass
class MetricExtrema:
    maximum: float = MAX_SENTINEL
    minimum: float = MIN_SENTINEL
    maximum_at: Optional[datetime] = None

    def update(self, value: float, timestamp: datetime) -> None:
        if value > self.maximum:
            self.maximum = value
            self.maximum_at = timestamp
        if value < self.minimum:
            self.minimum = value


@dataclass
class Extrema:
    """Running maximum and minimum of each tracked metric over a batch."""

    sample_count: int = 0
    metrics: Dict[Metric, MetricExtrema] = field(
        default_factory=lambda: {metric: MetricExtrema() for metric in TRACKED_METRICS}
    )

    def __getitem__(self, metric: Metric) -> MetricExtrema:
        return self.metrics[metric]

    def maximum(self, metric: Metric) -> float:
        return self.metrics[metric].maximum

    def minimum(self, metric: Metric) -> float:
        return self.metrics[metric].minimum

    def maximum_at(self, metric: Metric) -> Optional[datetime]:
        return self.metrics[metric].maximum_at


@dataclass
class AggregationResult:
    series: SeriesSet
    extrema: Extrema


class Aggregator:
    """Pure aggregation component that can be unit tested in isolation."""

    def aggregate(self, raw_samples: Iterable[RawSample]) -> AggregationResult:
        series = SeriesSet()
        extrema = Extrema()

        for index, raw in enumerate(raw_samples):
            try:
                sample = parse_sample(raw)
            except ParseError as exc:
                raise exc.at(index) from exc

            series.append(sample)
            extrema.sample_count += 1
            for metric in TRACKED_METRICS:
                extrema[metric].update(sample.value(metric), sample.timestamp)

        return AggregationResult(series=series, extrema=extrema)
