from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from weldwatch.api.deps import get_voltage_repository
from weldwatch.repositories.base import VoltageRecordRepository
from weldwatch.schemas.voltage import VoltageRecordIn, VoltageRow, VoltageWriteResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/voltage", tags=["store"])

Repository = Annotated[VoltageRecordRepository, Depends(get_voltage_repository)]


def _unavailable(e: Exception) -> HTTPException:
    logger.error("Store request failed: %s", e)
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail="InfluxDB unavailable",
    )


@router.post(
    "",
    response_model=VoltageWriteResponse,
    status_code=status.HTTP_201_CREATED,
)
def append_record(payload: VoltageRecordIn, repo: Repository) -> VoltageWriteResponse:
    try:
        repo.write_record(payload.to_record())
    except Exception as e:  # noqa: BLE001 - normalize storage failures
        raise _unavailable(e) from e
    return VoltageWriteResponse(id=payload.id, written_at=datetime.now(tz=timezone.utc))


@router.get("/latest", response_model=list[VoltageRow])
def latest_records(
    repo: Repository,
    limit: Annotated[int, Query(ge=1, le=1000)] = 100,
) -> list[VoltageRow]:
    try:
        records = repo.query_latest(limit=limit)
    except Exception as e:  # noqa: BLE001 - normalize storage failures
        raise _unavailable(e) from e
    return [
        VoltageRow(
            id=r.id,
            timestamp=r.timestamp,
            min_voltage=r.min_voltage,
            max_voltage=r.max_voltage,
            avg_voltage=r.avg_voltage,
            duration=r.duration or None,
            operator=r.operator or None,
        )
        for r in records
    ]


@router.get("/health", tags=["meta"])
def health(repo: Repository) -> dict[str, str]:
    try:
        repo.ping()
    except Exception as e:  # noqa: BLE001 - expose as 503 without leaking internals
        raise _unavailable(e) from e
    return {"status": "ok"}
