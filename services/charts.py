"""Per-metric time series chart rendering."""

from __future__ import annotations

import logging
import os
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional, Sequence, Union

from matplotlib.backends.backend_agg import FigureCanvasAgg
from matplotlib.figure import Figure

from models.records import METRIC_INFO, Metric
from services.aggregator import SeriesSet
from services.errors import RenderError
from services.severity import color_mapper

logger = logging.getLogger(__name__)

TICK_LABEL_FORMAT = "%b-%d-%y %H:%M"
LINE_COLOR = "black"

ColorSource = Union[str, Callable[[float], str]]


class ChartRenderer:
    """Draws one PNG chart per call into a fresh temporary file."""

    def __init__(
        self,
        output_dir: Optional[Path] = None,
        figsize: tuple[float, float] = (10.0, 6.0),
        dpi: int = 100,
    ) -> None:
        self.output_dir = output_dir
        self.figsize = figsize
        self.dpi = dpi
        if output_dir is not None:
            output_dir.mkdir(parents=True, exist_ok=True)

    def render_metric(self, series: SeriesSet, metric: Metric) -> Path:
        info = METRIC_INFO[metric]
        return self.render(
            series.timestamps,
            series.values(metric),
            title=info.title,
            y_label=info.unit,
            color=color_mapper(metric),
        )

    def render(
        self,
        timestamps: Sequence[datetime],
        values: Sequence[float],
        *,
        title: str,
        y_label: str,
        color: ColorSource = LINE_COLOR,
    ) -> Path:
        if len(timestamps) != len(values):
            raise RenderError(title, "timestamp and value counts differ")

        fd, name = tempfile.mkstemp(
            prefix="air-quality-",
            suffix=".png",
            dir=str(self.output_dir) if self.output_dir is not None else None,
        )
        path = Path(name)
        try:
            with os.fdopen(fd, "wb") as handle:
                figure = self._draw(timestamps, values, title=title, y_label=y_label, color=color)
                figure.savefig(handle, format="png", dpi=self.dpi)
        except Exception as exc:
            path.unlink(missing_ok=True)
            raise RenderError(title, str(exc)) from exc

        logger.debug("Rendered chart", extra={"metric": title, "artifact": path})
        return path

    def _draw(
        self,
        timestamps: Sequence[datetime],
        values: Sequence[float],
        *,
        title: str,
        y_label: str,
        color: ColorSource,
    ) -> Figure:
        figure = Figure(figsize=self.figsize, dpi=self.dpi)
        FigureCanvasAgg(figure)
        axes = figure.add_subplot()
        axes.set_title(title)
        axes.set_ylabel(y_label)

        if timestamps:
            marker_colors = (
                [color(value) for value in values] if callable(color) else color
            )
            axes.plot(timestamps, values, color=LINE_COLOR, linewidth=1.0, zorder=1)
            axes.scatter(timestamps, values, c=marker_colors, s=9, zorder=2)
            axes.set_xticks(list(timestamps))
            axes.set_xticklabels(
                [moment.strftime(TICK_LABEL_FORMAT) for moment in timestamps],
                rotation=90,
                fontsize=6,
            )
        else:
            axes.set_xticks([])

        figure.tight_layout()
        return figure
