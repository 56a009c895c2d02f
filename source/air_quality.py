"""HTTP client for the upstream air quality chart data endpoint."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Protocol

import httpx
from pydantic import ValidationError

from models.schemas import RawSample, ResultEnvelope
from services.errors import DecodeError, FetchError
from settings import get_settings

logger = logging.getLogger(__name__)

QUERY_TIME_FORMAT = "%Y%m%d%H%M%S"
QUERY_TYPES = "Co2,Humid,Pm10,Pm25,Temperature,Tvoc"


class SampleSource(Protocol):
    def fetch(self, serial_num: str, start: datetime, end: datetime) -> List[RawSample]:
        ...


def build_query(serial_num: str, start: datetime, end: datetime) -> Dict[str, str]:
    return {
        "serialNum": serial_num,
        "startTime": start.strftime(QUERY_TIME_FORMAT),
        "endTime": end.strftime(QUERY_TIME_FORMAT),
        "type": QUERY_TYPES,
    }


class AirQualityClient:
    """Minimal HTTP client for the device readings endpoint."""

    def __init__(
        self,
        url: str,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.url = url
        self._client = httpx.Client(timeout=timeout, transport=transport)

    def __enter__(self) -> "AirQualityClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def fetch(self, serial_num: str, start: datetime, end: datetime) -> List[RawSample]:
        """Return the raw readings of one device for the ``[start, end]`` window."""
        query = build_query(serial_num, start, end)
        try:
            response = self._client.post(self.url, json=query)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise FetchError(
                f"unable to get device data - status {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise FetchError(f"unable to get device data - {exc}") from exc

        envelope = self._decode(response)
        logger.info(
            "Fetched device readings",
            extra={
                "serial_num": serial_num,
                "status": envelope.result,
                "sample_count": len(envelope.data),
            },
        )
        return envelope.data

    @staticmethod
    def _decode(response: httpx.Response) -> ResultEnvelope:
        try:
            payload = response.json()
        except ValueError as exc:
            raise DecodeError(f"json parse failed - {exc}") from exc
        if not isinstance(payload, dict):
            raise DecodeError("json parse failed - response is not an object")
        try:
            return ResultEnvelope.model_validate(payload)
        except ValidationError as exc:
            raise DecodeError(f"json parse failed - {exc}") from exc


def build_default_client() -> AirQualityClient:
    settings = get_settings()
    return AirQualityClient(url=settings.api_url, timeout=settings.api_timeout)
