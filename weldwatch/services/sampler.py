from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone
from typing import Protocol

from weldwatch.core.errors import SinkError
from weldwatch.models.measurement import CLIENT_ID_PREFIX, MeasurementRecord

logger = logging.getLogger(__name__)

VOLTAGE_SPREAD = 2.0


class RecordSink(Protocol):
    async def append(self, record: MeasurementRecord) -> None: ...


def utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


def format_duration(seconds: float) -> str:
    total = int(round(seconds))
    minutes, secs = divmod(total, 60)
    return f"{minutes:02d}:{secs:02d}"


def build_record(
    live_value: float, *, now: datetime, operator: str, duration: str
) -> MeasurementRecord:
    millis = int(now.timestamp() * 1000)
    return MeasurementRecord(
        id=f"{CLIENT_ID_PREFIX}{millis}",
        timestamp=now.astimezone(timezone.utc),
        min_voltage=max(0.0, live_value - VOLTAGE_SPREAD),
        max_voltage=live_value + VOLTAGE_SPREAD,
        avg_voltage=live_value,
        duration=duration,
        operator=operator,
    )


class Sampler:
    """Periodically turns the live reading into a record and appends it.

    The schedule is a single asyncio task owned by the sampler. Appends run in
    their own tasks so a slow store never delays the next tick; failures are
    logged and dropped.
    """

    def __init__(
        self,
        *,
        sink: RecordSink,
        read_live_value: Callable[[], float | None],
        interval_seconds: float = 3.0,
        operator: str = "Admin",
        clock: Callable[[], datetime] = utc_now,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._sink = sink
        self._read_live_value = read_live_value
        self._interval_seconds = float(interval_seconds)
        self._operator = operator
        self._duration = format_duration(interval_seconds)
        self._clock = clock
        self._sleep = sleep
        self._task: asyncio.Task[None] | None = None
        self._appends: set[asyncio.Task[None]] = set()

    @property
    def interval_seconds(self) -> float:
        return self._interval_seconds

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> bool:
        if self.running:
            return False
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._run(), name="voltage-sampler")
        logger.info("Sampler started (interval %.1fs)", self._interval_seconds)
        return True

    async def stop(self) -> None:
        """Cancel the schedule and wait for appends already in flight."""
        task, self._task = self._task, None
        if task is not None:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
            logger.info("Sampler stopped")
        if self._appends:
            await asyncio.gather(*self._appends, return_exceptions=True)

    def sample(self) -> MeasurementRecord | None:
        value = self._read_live_value()
        if value is None:
            logger.debug("No live reading yet, skipping tick")
            return None
        record = build_record(
            value, now=self._clock(), operator=self._operator, duration=self._duration
        )
        task = asyncio.get_running_loop().create_task(self._append(record))
        self._appends.add(task)
        task.add_done_callback(self._appends.discard)
        return record

    async def _run(self) -> None:
        while True:
            await self._sleep(self._interval_seconds)
            self.sample()

    async def _append(self, record: MeasurementRecord) -> None:
        try:
            await self._sink.append(record)
        except SinkError as e:
            logger.warning("Could not store %s: %s", record.id, e, extra={"record_id": record.id})
