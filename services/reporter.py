"""Report orchestration: fetch, aggregate, compose, render."""

from __future__ import annotations

import logging
import time
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from models.records import CHART_ORDER
from services.aggregator import Aggregator, SeriesSet
from services.alerts import AlertComposer, build_alert_composer
from services.charts import ChartRenderer
from services.errors import RenderError
from settings import get_settings
from source.air_quality import SampleSource, build_default_client

logger = logging.getLogger(__name__)


@dataclass
class Report:
    """Alert text plus one chart artifact per metric, in ``CHART_ORDER``."""

    text: str
    images: List[Path] = field(default_factory=list)
    sample_count: int = 0

    def cleanup(self) -> None:
        """Delete every chart artifact that still exists."""
        _remove_all(self.images)


class ReportService:
    """Coordinates the data source, aggregation, alert text and chart rendering."""

    def __init__(
        self,
        source: SampleSource,
        aggregator: Aggregator,
        composer: AlertComposer,
        renderer: ChartRenderer,
        render_workers: int = 1,
    ) -> None:
        self.source = source
        self.aggregator = aggregator
        self.composer = composer
        self.renderer = renderer
        self.render_workers = max(1, render_workers)

    def generate(self, serial_num: str, start: datetime, end: datetime) -> Report:
        """Build the report for one device and window.

        Any failure aborts the whole report; charts written before the
        failure are removed before the error propagates.
        """
        start_time = time.perf_counter()
        logger.info("Generating report", extra={"serial_num": serial_num})

        raw_samples = self.source.fetch(serial_num, start, end)
        result = self.aggregator.aggregate(raw_samples)
        text = self.composer.compose(result.extrema)
        images = self._render_charts(result.series)

        processing_ms = int((time.perf_counter() - start_time) * 1000)
        logger.info(
            "Report ready",
            extra={
                "serial_num": serial_num,
                "sample_count": len(result.series),
                "chart_count": len(images),
                "processing_ms": processing_ms,
            },
        )
        return Report(text=text, images=images, sample_count=len(result.series))

    def _render_charts(self, series: SeriesSet) -> List[Path]:
        if self.render_workers == 1:
            return self._render_sequential(series)
        return self._render_parallel(series)

    def _render_sequential(self, series: SeriesSet) -> List[Path]:
        images: List[Path] = []
        try:
            for metric in CHART_ORDER:
                images.append(self.renderer.render_metric(series, metric))
        except RenderError:
            _remove_all(images)
            raise
        return images

    def _render_parallel(self, series: SeriesSet) -> List[Path]:
        with ThreadPoolExecutor(max_workers=self.render_workers) as executor:
            futures: List[Future[Path]] = [
                executor.submit(self.renderer.render_metric, series, metric)
                for metric in CHART_ORDER
            ]

        images: List[Path] = []
        failure: Optional[BaseException] = None
        for future in futures:
            error = future.exception()
            if error is None:
                images.append(future.result())
            elif failure is None:
                failure = error

        if failure is not None:
            _remove_all(images)
            raise failure
        return images

    def shutdown(self) -> None:
        """Release the data source connection."""
        close = getattr(self.source, "close", None)
        if close is not None:
            close()


def _remove_all(images: List[Path]) -> None:
    for image in images:
        image.unlink(missing_ok=True)


@lru_cache
def build_default_reporter(policy: Optional[str] = None) -> ReportService:
    """Factory that wires the report service from settings."""
    settings = get_settings()
    chart_dir = Path(settings.chart_dir) if settings.chart_dir else None
    return ReportService(
        source=build_default_client(),
        aggregator=Aggregator(),
        composer=build_alert_composer(policy or settings.alert_policy),
        renderer=ChartRenderer(output_dir=chart_dir),
        render_workers=settings.render_workers,
    )

