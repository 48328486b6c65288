from __future__ import annotations

from typing import Protocol

from weldwatch.models.measurement import MeasurementRecord


class VoltageRecordRepository(Protocol):
    def ping(self) -> None: ...

    def write_record(self, record: MeasurementRecord) -> None: ...

    def query_latest(self, *, limit: int) -> list[MeasurementRecord]: ...
