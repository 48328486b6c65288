from __future__ import annotations

from datetime import timedelta
from typing import Annotated

from fastapi import Depends, Request

from weldwatch.core.config import Settings
from weldwatch.repositories.base import VoltageRecordRepository
from weldwatch.repositories.influx import InfluxVoltageRepository
from weldwatch.services.history_view import HistoryView
from weldwatch.services.monitoring import MonitoringService


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_voltage_repository(
    request: Request, settings: Annotated[Settings, Depends(get_settings)]
) -> VoltageRecordRepository:
    return InfluxVoltageRepository(
        client=request.app.state.influx_client,
        org=settings.influx_org,
        bucket=settings.influx_bucket,
        measurement=settings.influx_measurement,
        lookback=timedelta(days=settings.store_lookback_days),
    )


def get_monitoring_service(request: Request) -> MonitoringService:
    return request.app.state.monitoring


def get_history_view(request: Request) -> HistoryView:
    return request.app.state.history_view


Monitoring = Annotated[MonitoringService, Depends(get_monitoring_service)]
History = Annotated[HistoryView, Depends(get_history_view)]
