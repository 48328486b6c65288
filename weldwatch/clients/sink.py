from __future__ import annotations

import logging

import httpx
from pydantic import TypeAdapter, ValidationError

from weldwatch.core.errors import MalformedResponseError, SinkUnavailableError
from weldwatch.models.measurement import MeasurementRecord
from weldwatch.schemas.voltage import VoltageRecordIn, VoltageRow

logger = logging.getLogger(__name__)

APPEND_PATH = "/api/voltage"
LATEST_PATH = "/api/voltage/latest"

_rows_adapter = TypeAdapter(list[VoltageRow])


class SinkClient:
    """HTTP client for the measurement store."""

    def __init__(
        self,
        *,
        base_url: str,
        timeout_seconds: float,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=timeout_seconds,
            headers={"Accept": "application/json"},
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    async def aclose(self) -> None:
        await self._client.aclose()

    async def append(self, record: MeasurementRecord) -> None:
        body = VoltageRecordIn.from_record(record).wire_payload()
        # httpx raises RuntimeError once the client has been closed.
        try:
            resp = await self._client.post(APPEND_PATH, json=body)
            resp.raise_for_status()
        except (httpx.HTTPError, RuntimeError) as e:
            raise SinkUnavailableError(f"append of {record.id} failed: {e}") from e

    async def latest(self, limit: int) -> list[VoltageRow]:
        try:
            resp = await self._client.get(LATEST_PATH, params={"limit": int(limit)})
            resp.raise_for_status()
        except httpx.HTTPError as e:
            raise SinkUnavailableError(f"history read failed: {e}") from e

        try:
            payload = resp.json()
        except ValueError as e:
            raise MalformedResponseError("history response is not JSON") from e
        try:
            rows = _rows_adapter.validate_python(payload)
        except ValidationError as e:
            raise MalformedResponseError("unexpected history response shape") from e
        logger.debug("Fetched %d history rows", len(rows), extra={"count": len(rows)})
        return rows
