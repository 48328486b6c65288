from __future__ import annotations

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from weldwatch.api import deps
from weldwatch.core.config import Settings
from weldwatch.factory import build_history_view, build_monitoring_service, create_app
from weldwatch.services.history_view import HistoryView
from weldwatch.services.monitoring import MonitoringService
from tests.fakes import FakeSink, FakeVoltageRepository


@pytest.fixture()
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        _env_file=None,
        env="test",
        debug=True,
        docs_enabled=False,
        cors_origins=["http://localhost"],
        trusted_hosts=["testserver", "localhost"],
        sink_url="http://sink.example.com:3001",
        sink_timeout_seconds=1.0,
        sample_interval_seconds=3.0,
        operator_name="Admin",
        history_limit=100,
        store_enabled=True,
        influx_url="http://example.com:8086",
        influx_token="test-token-1234567890",
        influx_org="test",
        influx_bucket="test",
        influx_measurement="welding_voltage",
        influx_timeout_ms=5000,
    )


@pytest.fixture()
def fake_sink() -> FakeSink:
    return FakeSink()


@pytest.fixture()
def fake_repo() -> FakeVoltageRepository:
    return FakeVoltageRepository()


@pytest.fixture()
def monitoring(settings: Settings, fake_sink: FakeSink) -> MonitoringService:
    return build_monitoring_service(settings, fake_sink)


@pytest.fixture()
def history_view(settings: Settings, fake_sink: FakeSink) -> HistoryView:
    return build_history_view(settings, fake_sink, timezone.utc)


@pytest.fixture()
def client(
    settings: Settings,
    fake_repo: FakeVoltageRepository,
    monitoring: MonitoringService,
    history_view: HistoryView,
) -> TestClient:
    app = create_app(settings)
    app.dependency_overrides[deps.get_voltage_repository] = lambda: fake_repo
    app.dependency_overrides[deps.get_monitoring_service] = lambda: monitoring
    app.dependency_overrides[deps.get_history_view] = lambda: history_view
    with TestClient(app) as client:
        yield client


@pytest.fixture()
def today() -> datetime:
    now = datetime.now(tz=timezone.utc)
    return now.replace(hour=12, minute=0, second=0, microsecond=0)
