from __future__ import annotations

import math
from datetime import datetime

import numpy as np
import pytest

from models.schemas import RawSample
from services.errors import ParseError
from services.parser import parse_float32, parse_sample, parse_timestamp


def _raw(**overrides: str) -> RawSample:
    payload = {
        "ReportTime": "2024-03-01T10:05:00",
        "Co2": "612",
        "Tvoc": "120",
        "Pm10": "12.5",
        "Pm25": "8.25",
        "Temperature": "21.5",
        "Humidity": "40",
        "SerialNum": "PICO-1",
    }
    payload.update(overrides)
    return RawSample.model_validate(payload)


def test_parse_sample_converts_every_field() -> None:
    sample = parse_sample(_raw())

    assert sample.timestamp == datetime(2024, 3, 1, 10, 5, 0)
    assert sample.co2 == 612.0
    assert sample.voc == 120.0
    assert sample.pm10 == 12.5
    assert sample.pm25 == 8.25
    assert sample.temperature == 21.5
    assert sample.humidity == 40.0


def test_parse_sample_keeps_single_precision() -> None:
    sample = parse_sample(_raw(Temperature="21.3"))

    assert sample.temperature == float(np.float32(21.3))
    assert sample.temperature != 21.3


@pytest.mark.parametrize(
    ("field", "value"),
    [
        ("Co2", "abc"),
        ("Tvoc", ""),
        ("Pm10", " 12"),
        ("Pm25", "1,5"),
        ("Humidity", "forty"),
        ("Co2", "1_000"),
        ("Co2", "\uff18\uff15\uff10"),
        ("Pm25", "\u0668\u0665\u0660"),
        ("Temperature", "21.5\n"),
    ],
)
def test_parse_sample_rejects_invalid_numbers(field: str, value: str) -> None:
    with pytest.raises(ParseError) as excinfo:
        parse_sample(_raw(**{field: value}))

    assert excinfo.value.field == field
    assert excinfo.value.value == value


def test_parse_sample_rejects_missing_field() -> None:
    raw = RawSample.model_validate({"ReportTime": "2024-03-01T10:05:00", "Co2": "400"})

    with pytest.raises(ParseError) as excinfo:
        parse_sample(raw)

    assert excinfo.value.field == "Tvoc"


@pytest.mark.parametrize(
    "value",
    ["2024-03-01 10:05:00", "2024-03-01T10:05:00Z", "20240301100500", ""],
)
def test_parse_timestamp_requires_fixed_layout(value: str) -> None:
    with pytest.raises(ParseError) as excinfo:
        parse_timestamp(value)

    assert excinfo.value.field == "ReportTime"


def test_parse_float32_rejects_overflow() -> None:
    with pytest.raises(ParseError) as excinfo:
        parse_float32("Co2", "1e40")

    assert excinfo.value.reason == "value out of range"


def test_humid_alias_is_accepted() -> None:
    raw = _raw()
    payload = raw.model_dump(by_alias=True)
    payload.pop("Humidity")
    payload["Humid"] = "55"

    sample = parse_sample(RawSample.model_validate(payload))

    assert sample.humidity == 55.0


@pytest.mark.parametrize(
    ("value", "expected"),
    [("850", 850.0), ("-3.5", -3.5), (".5", 0.5), ("1e3", 1000.0), ("+2.", 2.0)],
)
def test_parse_float32_accepts_decimal_text(value: str, expected: float) -> None:
    assert parse_float32("Co2", value) == expected


def test_parse_float32_accepts_infinity_words() -> None:
    assert math.isinf(parse_float32("Co2", "Infinity"))
    assert math.isnan(parse_float32("Co2", "NaN"))
