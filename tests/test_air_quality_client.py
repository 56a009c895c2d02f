from __future__ import annotations

import json
from datetime import datetime
from typing import Callable, List

import httpx
import pytest

from services.errors import DecodeError, FetchError
from source.air_quality import AirQualityClient, build_query

URL = "http://upstream.test/mqtt/GetAirQualityForChart"
START = datetime(2024, 3, 1, 0, 0, 0)
END = datetime(2024, 3, 2, 0, 0, 0)


def _client(handler: Callable[[httpx.Request], httpx.Response]) -> AirQualityClient:
    return AirQualityClient(url=URL, transport=httpx.MockTransport(handler))


def test_build_query_formats_window() -> None:
    assert build_query("PICO-1", START, END) == {
        "serialNum": "PICO-1",
        "startTime": "20240301000000",
        "endTime": "20240302000000",
        "type": "Co2,Humid,Pm10,Pm25,Temperature,Tvoc",
    }


def test_fetch_posts_query_and_decodes_envelope() -> None:
    requests: List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(
            200,
            json={
                "Result": "OK",
                "Data": [
                    {
                        "Co2": "612",
                        "Tvoc": "120",
                        "Pm10": "12",
                        "Pm25": "8",
                        "Temperature": "21.5",
                        "Humid": "40",
                        "ReportTime": "2024-03-01T10:05:00",
                        "SerialNum": "PICO-1",
                        "Lat": "51.5",
                        "Lng": "-0.12",
                    }
                ],
            },
        )

    with _client(handler) as client:
        samples = client.fetch("PICO-1", START, END)

    assert len(requests) == 1
    assert requests[0].method == "POST"
    assert str(requests[0].url) == URL
    assert json.loads(requests[0].content) == build_query("PICO-1", START, END)
    assert len(samples) == 1
    assert samples[0].co2 == "612"
    assert samples[0].humidity == "40"
    assert samples[0].lat == "51.5"


def test_fetch_treats_null_data_as_empty() -> None:
    with _client(lambda request: httpx.Response(200, json={"Result": "OK", "Data": None})) as client:
        assert client.fetch("PICO-1", START, END) == []


def test_fetch_coerces_numeric_values_to_text() -> None:
    payload = {"Result": "OK", "Data": [{"Co2": 612, "ReportTime": "2024-03-01T10:05:00"}]}

    with _client(lambda request: httpx.Response(200, json=payload)) as client:
        samples = client.fetch("PICO-1", START, END)

    assert samples[0].co2 == "612"


def test_fetch_error_status_raises_fetch_error() -> None:
    with _client(lambda request: httpx.Response(503, text="unavailable")) as client:
        with pytest.raises(FetchError, match="503"):
            client.fetch("PICO-1", START, END)


def test_fetch_transport_failure_raises_fetch_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with _client(handler) as client:
        with pytest.raises(FetchError, match="connection refused"):
            client.fetch("PICO-1", START, END)


@pytest.mark.parametrize(
    "body",
    ["<html>not json</html>", "[1, 2, 3]", '{"Result": "OK", "Data": "oops"}'],
)
def test_fetch_malformed_envelope_raises_decode_error(body: str) -> None:
    with _client(lambda request: httpx.Response(200, text=body)) as client:
        with pytest.raises(DecodeError):
            client.fetch("PICO-1", START, END)
