from __future__ import annotations

import math
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator

from weldwatch.models.measurement import MeasurementRecord

DURATION_PATTERN = r"^\d{2}:\d{2}$"


def _to_utc(v: datetime) -> datetime:
    if v.tzinfo is None:
        return v.replace(tzinfo=timezone.utc)
    return v.astimezone(timezone.utc)


class VoltageRecordIn(BaseModel):
    """Append body, camelCase on the wire."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(min_length=1, max_length=128)
    timestamp: datetime
    min_voltage: float = Field(alias="minVoltage")
    max_voltage: float = Field(alias="maxVoltage")
    avg_voltage: float = Field(alias="avgVoltage")
    duration: str = Field(pattern=DURATION_PATTERN)
    operator: str = Field(min_length=1, max_length=64)

    @field_validator("timestamp")
    @classmethod
    def _timestamp_to_utc(cls, v: datetime) -> datetime:
        return _to_utc(v)

    @field_validator("min_voltage", "max_voltage", "avg_voltage")
    @classmethod
    def _finite(cls, v: float) -> float:
        if not math.isfinite(v):
            raise ValueError("voltage must be a finite number")
        return v

    @classmethod
    def from_record(cls, record: MeasurementRecord) -> VoltageRecordIn:
        return cls(
            id=record.id,
            timestamp=record.timestamp,
            min_voltage=record.min_voltage,
            max_voltage=record.max_voltage,
            avg_voltage=record.avg_voltage,
            duration=record.duration,
            operator=record.operator,
        )

    def to_record(self) -> MeasurementRecord:
        return MeasurementRecord(
            id=self.id,
            timestamp=self.timestamp,
            min_voltage=self.min_voltage,
            max_voltage=self.max_voltage,
            avg_voltage=self.avg_voltage,
            duration=self.duration,
            operator=self.operator,
        )

    def wire_payload(self) -> dict[str, object]:
        payload = self.model_dump(by_alias=True)
        payload["timestamp"] = to_iso_millis(self.timestamp)
        return payload


class VoltageRow(BaseModel):
    """One stored row as returned by the store, snake_case on the wire."""

    id: str
    timestamp: datetime
    min_voltage: float
    max_voltage: float
    avg_voltage: float
    duration: str | None = Field(default=None, pattern=DURATION_PATTERN)
    operator: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _id_to_str(cls, v: object) -> object:
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v


class VoltageWriteResponse(BaseModel):
    id: str
    written_at: datetime


class LiveReadingIn(BaseModel):
    voltage: float = Field(ge=0.0)

    @field_validator("voltage")
    @classmethod
    def _finite(cls, v: float) -> float:
        if not math.isfinite(v):
            raise ValueError("voltage must be a finite number")
        return v


class MonitoringStatus(BaseModel):
    active: bool
    session: str | None = None
    live_voltage: float | None = None
    interval_seconds: float


def to_iso_millis(dt: datetime) -> str:
    return _to_utc(dt).isoformat(timespec="milliseconds").replace("+00:00", "Z")
