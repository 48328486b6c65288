from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import tzinfo
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.staticfiles import StaticFiles
from influxdb_client import InfluxDBClient
from starlette.middleware.trustedhost import TrustedHostMiddleware

from weldwatch.api.router import api_router, store_router
from weldwatch.clients.sink import SinkClient
from weldwatch.core.config import Settings, load_settings
from weldwatch.core.logging import configure_logging
from weldwatch.services.history import HistorySource, HistoryStore, resolve_timezone
from weldwatch.services.history_view import HistoryView
from weldwatch.services.monitoring import MonitoringService
from weldwatch.services.report import Letterhead, ReportRenderer
from weldwatch.services.sampler import RecordSink, format_duration
from weldwatch.web.router import ui_router

logger = logging.getLogger(__name__)


def create_influx_client(settings: Settings) -> InfluxDBClient:
    return InfluxDBClient(
        url=str(settings.influx_url),
        token=settings.influx_token,
        org=settings.influx_org,
        timeout=settings.influx_timeout_ms,
    )


def build_letterhead(settings: Settings) -> Letterhead:
    return Letterhead(
        name=settings.letterhead_name,
        subtitle=settings.letterhead_subtitle,
        address_lines=tuple(settings.letterhead_address),
        website=settings.letterhead_website,
        email=settings.letterhead_email,
        place=settings.letterhead_place,
        logo_url=settings.letterhead_logo_url,
        signatory=settings.letterhead_signatory,
    )


def build_monitoring_service(settings: Settings, sink: RecordSink) -> MonitoringService:
    return MonitoringService(
        sink=sink,
        interval_seconds=settings.sample_interval_seconds,
        operator=settings.operator_name,
    )


def build_history_view(
    settings: Settings, source: HistorySource, tz: tzinfo | None = None
) -> HistoryView:
    store = HistoryStore(
        source=source,
        limit=settings.history_limit,
        default_duration=format_duration(settings.sample_interval_seconds),
        default_operator=settings.operator_name,
    )
    renderer = ReportRenderer(letterhead=build_letterhead(settings), tz=tz)
    return HistoryView(store=store, renderer=renderer, tz=tz)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or load_settings()
    configure_logging(settings.log_level, json_output=settings.log_json)
    tz = resolve_timezone(settings.timezone)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.settings = settings
        if settings.store_enabled:
            app.state.influx_client = create_influx_client(settings)
        sink = SinkClient(
            base_url=settings.sink_base_url,
            timeout_seconds=settings.sink_timeout_seconds,
        )
        app.state.sink = sink
        app.state.monitoring = build_monitoring_service(settings, sink)
        app.state.history_view = build_history_view(settings, sink, tz)
        logger.info("weldwatch started, sink at %s", sink.base_url, extra={"sink_url": sink.base_url})

        yield
        await app.state.monitoring.shutdown()
        await sink.aclose()
        if settings.store_enabled:
            app.state.influx_client.close()

    docs_enabled = settings.docs_enabled and not settings.is_production
    app = FastAPI(
        title="Weldwatch",
        version="0.1.0",
        debug=settings.debug,
        docs_url="/docs" if docs_enabled else None,
        redoc_url=None,
        openapi_url="/openapi.json" if docs_enabled else None,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(GZipMiddleware, minimum_size=1024)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "OPTIONS"],
        allow_headers=["Content-Type"],
    )
    if settings.trusted_hosts:
        app.add_middleware(TrustedHostMiddleware, allowed_hosts=settings.trusted_hosts)

    @app.middleware("http")
    async def security_headers(request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "no-referrer")
        response.headers.setdefault("Cross-Origin-Opener-Policy", "same-origin")
        if settings.is_production:
            response.headers.setdefault(
                "Strict-Transport-Security", "max-age=31536000; includeSubDomains"
            )
        return response

    @app.get("/", tags=["meta"])
    def root():
        return {"name": "weldwatch", "status": "ok"}

    app.include_router(api_router)
    if settings.store_enabled:
        app.include_router(store_router)
    app.include_router(ui_router)

    static_dir = Path(__file__).resolve().parent / "web" / "static"
    app.mount("/static", StaticFiles(directory=static_dir), name="static")
    return app
