"""Pydantic schemas for the upstream air quality API payload."""

from __future__ import annotations

from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class RawSample(BaseModel):
    """One reading as received. Every value is text, nothing is interpreted here."""

    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    co2: str = Field(default="", alias="Co2")
    tvoc: str = Field(default="", alias="Tvoc")
    pm10: str = Field(default="", alias="Pm10")
    pm25: str = Field(default="", alias="Pm25")
    temperature: str = Field(default="", alias="Temperature")
    humidity: str = Field(
        default="",
        validation_alias=AliasChoices("Humidity", "Humid", "humidity"),
        serialization_alias="Humidity",
    )
    report_time: str = Field(default="", alias="ReportTime")

    serial_num: Optional[str] = Field(default=None, alias="SerialNum")
    lat: Optional[str] = Field(default=None, alias="Lat")
    lng: Optional[str] = Field(default=None, alias="Lng")
    ip: Optional[str] = Field(default=None, alias="Ip")


class ResultEnvelope(BaseModel):
    """Wrapper object returned by the chart data endpoint."""

    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    result: Optional[str] = Field(default=None, alias="Result")
    data: List[RawSample] = Field(default_factory=list, alias="Data")

    @field_validator("data", mode="before")
    @classmethod
    def _null_data_is_empty(cls, value: object) -> object:
        return [] if value is None else value
