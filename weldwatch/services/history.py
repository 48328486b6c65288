from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date, datetime, tzinfo
from typing import Protocol
from zoneinfo import ZoneInfo

from weldwatch.core.errors import SinkError
from weldwatch.models.measurement import STORE_ID_PREFIX, MeasurementRecord
from weldwatch.schemas.voltage import VoltageRow

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 100


class HistorySource(Protocol):
    async def latest(self, limit: int) -> list[VoltageRow]: ...


def resolve_timezone(name: str | None) -> tzinfo | None:
    """``None`` means the host's local zone."""
    if not name:
        return None
    return ZoneInfo(name)


def to_local(ts: datetime, tz: tzinfo | None = None) -> datetime:
    # Naive timestamps are already local wall-clock time.
    if ts.tzinfo is None:
        return ts
    return ts.astimezone(tz)


def local_today(tz: tzinfo | None = None) -> date:
    return datetime.now(tz).date()


def filter_by_day(
    records: Iterable[MeasurementRecord], day: date, tz: tzinfo | None = None
) -> list[MeasurementRecord]:
    return [r for r in records if to_local(r.timestamp, tz).date() == day]


def row_to_record(row: VoltageRow, *, duration: str, operator: str) -> MeasurementRecord:
    return MeasurementRecord(
        id=f"{STORE_ID_PREFIX}{row.id}",
        timestamp=row.timestamp,
        min_voltage=row.min_voltage,
        max_voltage=row.max_voltage,
        avg_voltage=row.avg_voltage,
        duration=row.duration or duration,
        operator=row.operator or operator,
    )


class HistoryStore:
    """The most recent stored records, replaced wholesale on every load."""

    def __init__(
        self,
        *,
        source: HistorySource,
        limit: int = DEFAULT_HISTORY_LIMIT,
        default_duration: str = "00:03",
        default_operator: str = "Admin",
    ) -> None:
        self._source = source
        self._limit = max(int(limit), 1)
        self._default_duration = default_duration
        self._default_operator = default_operator
        self._records: list[MeasurementRecord] = []

    @property
    def records(self) -> list[MeasurementRecord]:
        return list(self._records)

    async def load(self) -> list[MeasurementRecord]:
        try:
            rows = await self._source.latest(self._limit)
        except SinkError as e:
            logger.warning("History unavailable, showing no records: %s", e)
            rows = []

        self._records = [
            row_to_record(
                row, duration=self._default_duration, operator=self._default_operator
            )
            for row in rows[: self._limit]
        ]
        logger.info("Loaded %d history records", len(self._records), extra={"count": len(self._records)})
        return self.records
