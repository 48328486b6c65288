from __future__ import annotations

from fastapi import APIRouter

from weldwatch.api.deps import Monitoring
from weldwatch.schemas.voltage import LiveReadingIn, MonitoringStatus

router = APIRouter(prefix="/monitoring")


@router.get("", response_model=MonitoringStatus)
async def monitoring_status(monitoring: Monitoring) -> MonitoringStatus:
    return monitoring.status()


@router.post("/on", response_model=MonitoringStatus)
async def monitoring_on(monitoring: Monitoring) -> MonitoringStatus:
    return await monitoring.turn_on()


@router.post("/off", response_model=MonitoringStatus)
async def monitoring_off(monitoring: Monitoring) -> MonitoringStatus:
    return await monitoring.turn_off()


@router.put("/reading", response_model=MonitoringStatus)
async def update_reading(payload: LiveReadingIn, monitoring: Monitoring) -> MonitoringStatus:
    monitoring.update_reading(payload.voltage)
    return monitoring.status()
