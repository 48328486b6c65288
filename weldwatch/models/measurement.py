from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

CLIENT_ID_PREFIX = "WLD_"
STORE_ID_PREFIX = "DB_"


@dataclass(frozen=True)
class MeasurementRecord:
    id: str
    timestamp: datetime
    min_voltage: float
    max_voltage: float
    avg_voltage: float
    duration: str
    operator: str


@dataclass(frozen=True)
class Session:
    token: str
    started_at: datetime
