"""Exceptions raised while generating a report."""

from __future__ import annotations

from typing import Optional


class ReportError(Exception):
    """Base class for every failure that aborts report generation."""


class FetchError(ReportError):
    """The upstream data source could not be reached or answered with an error status."""


class DecodeError(ReportError):
    """The upstream response envelope is malformed."""


class ParseError(ReportError):
    """A field of a raw reading is not valid numeric or timestamp text."""

    def __init__(
        self,
        field: str,
        value: str,
        reason: str = "invalid value",
        index: Optional[int] = None,
    ) -> None:
        self.field = field
        self.value = value
        self.reason = reason
        self.index = index
        super().__init__(self._describe())

    def _describe(self) -> str:
        where = f" in record {self.index}" if self.index is not None else ""
        return f"{self.reason} for field {self.field!r}{where}: {self.value!r}"

    def at(self, index: int) -> "ParseError":
        """Return a copy of this error tagged with the failing record index."""
        return ParseError(self.field, self.value, reason=self.reason, index=index)


class RenderError(ReportError):
    """A chart could not be drawn or written."""

    def __init__(self, chart: str, reason: str) -> None:
        self.chart = chart
        self.reason = reason
        super().__init__(f"failed to render chart {chart!r}: {reason}")
