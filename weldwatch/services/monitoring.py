from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from datetime import datetime

from weldwatch.schemas.voltage import MonitoringStatus
from weldwatch.services.sampler import RecordSink, Sampler, utc_now
from weldwatch.services.session import SessionController


class LiveReading:
    def __init__(self) -> None:
        self._voltage: float | None = None

    @property
    def voltage(self) -> float | None:
        return self._voltage

    def update(self, voltage: float) -> None:
        self._voltage = float(voltage)


class MonitoringService:
    def __init__(
        self,
        *,
        sink: RecordSink,
        interval_seconds: float,
        operator: str,
        clock: Callable[[], datetime] = utc_now,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._clock = clock
        self._lock = asyncio.Lock()
        self.reading = LiveReading()
        self.sessions = SessionController()
        self.sampler = Sampler(
            sink=sink,
            read_live_value=lambda: self.reading.voltage,
            interval_seconds=interval_seconds,
            operator=operator,
            clock=clock,
            sleep=sleep,
        )

    @property
    def active(self) -> bool:
        return self.sampler.running

    def update_reading(self, voltage: float) -> None:
        self.reading.update(voltage)

    # on and off are serialised so the session always brackets the sampler.
    async def turn_on(self) -> MonitoringStatus:
        async with self._lock:
            self.sessions.activate(now=self._clock())
            self.sampler.start()
            return self.status()

    async def turn_off(self) -> MonitoringStatus:
        async with self._lock:
            await self.sampler.stop()
            self.sessions.deactivate()
            return self.status()

    async def shutdown(self) -> None:
        await self.turn_off()

    def status(self) -> MonitoringStatus:
        session = self.sessions.current
        return MonitoringStatus(
            active=self.active,
            session=session.token if session is not None else None,
            live_voltage=self.reading.voltage,
            interval_seconds=self.sampler.interval_seconds,
        )
