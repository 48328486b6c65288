from __future__ import annotations

from pathlib import Path

from pydantic import AnyHttpUrl, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="APP_",
        case_sensitive=False,
    )

    env: str = Field(default="development")
    debug: bool = Field(default=False)
    docs_enabled: bool = Field(default=True)

    log_level: str = Field(default="INFO")
    log_json: bool = Field(default=False)

    cors_origins: list[str] = Field(default_factory=list)
    trusted_hosts: list[str] = Field(default_factory=lambda: ["localhost", "127.0.0.1"])

    sink_url: AnyHttpUrl = Field(default="http://localhost:3001")
    sink_timeout_seconds: float = Field(default=5.0, ge=0.5, le=60.0)

    sample_interval_seconds: float = Field(default=3.0, ge=0.1, le=3600.0)
    operator_name: str = Field(default="Admin", min_length=1, max_length=64)
    history_limit: int = Field(default=100, ge=1, le=1000)
    timezone: str | None = Field(default=None, max_length=64)

    letterhead_name: str = Field(default="POLITEKNIK PURBAYA")
    letterhead_subtitle: str = Field(default="POLITEKNIK TEKNOPRENEUR")
    letterhead_address: list[str] = Field(
        default_factory=lambda: [
            "Kampus I: Jl. Pancakarya No.1 Kajen, Talang – Tegal 52193",
            "Kampus II: Jl. Supriyadi No. 72 Trayeman, Slawi – Tegal 52414",
            "Telp. (0283) 4546201, HP: 0821 1146 0080",
        ]
    )
    letterhead_website: str = Field(default="www.purbaya.ac.id")
    letterhead_email: str = Field(default="info@purbaya.ac.id")
    letterhead_place: str = Field(default="Tegal")
    letterhead_logo_url: str = Field(default="/static/logo.svg")
    letterhead_signatory: str = Field(default="Operator Praktik Pengelasan")
    report_dir: Path | None = Field(default=None)

    store_enabled: bool = Field(default=True)
    influx_url: AnyHttpUrl = Field(default="http://influxdb:8086")
    influx_token: str = Field(default="")
    influx_org: str = Field(default="")
    influx_bucket: str = Field(default="")
    influx_measurement: str = Field(default="welding_voltage", min_length=1, max_length=64)
    influx_timeout_ms: int = Field(default=10_000, ge=1000, le=120_000)
    store_lookback_days: int = Field(default=30, ge=1, le=3650)

    @model_validator(mode="after")
    def _require_influx_for_store(self) -> Settings:
        if not self.store_enabled:
            return self
        if len(self.influx_token) < 10:
            raise ValueError("influx_token must be at least 10 characters when the store is enabled")
        if not self.influx_org or not self.influx_bucket:
            raise ValueError("influx_org and influx_bucket are required when the store is enabled")
        return self

    @property
    def is_production(self) -> bool:
        return self.env.lower() == "production"

    @property
    def sink_base_url(self) -> str:
        return str(self.sink_url).rstrip("/")


def load_settings() -> Settings:
    settings = Settings()
    if not settings.cors_origins:
        settings.cors_origins = ["http://localhost:3000", "http://localhost:8000"]
    return settings
