from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

from influxdb_client import InfluxDBClient, Point, WritePrecision
from influxdb_client.client.write_api import SYNCHRONOUS

from weldwatch.models.measurement import MeasurementRecord

VOLTAGE_FIELDS = ["record_id", "min_voltage", "max_voltage", "avg_voltage", "duration", "operator"]


def to_rfc3339(dt: datetime) -> str:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def flux_str(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


class InfluxVoltageRepository:
    def __init__(
        self,
        *,
        client: InfluxDBClient,
        org: str,
        bucket: str,
        measurement: str,
        lookback: timedelta,
    ) -> None:
        self._client = client
        self._org = org
        self._bucket = bucket
        self._measurement = measurement
        self._lookback = lookback

    def ping(self) -> None:
        self._client.ping()

    def write_record(self, record: MeasurementRecord) -> None:
        ts = record.timestamp
        if ts.tzinfo is None:
            ts = ts.replace(tzinfo=timezone.utc)

        point = (
            Point(self._measurement)
            .field("record_id", record.id)
            .field("min_voltage", float(record.min_voltage))
            .field("max_voltage", float(record.max_voltage))
            .field("avg_voltage", float(record.avg_voltage))
            .field("duration", record.duration)
            .field("operator", record.operator)
            .time(ts, WritePrecision.MS)
        )
        write_api = self._client.write_api(write_options=SYNCHRONOUS)
        write_api.write(bucket=self._bucket, org=self._org, record=point)

    def query_latest(self, *, limit: int) -> list[MeasurementRecord]:
        stop = datetime.now(tz=timezone.utc)
        start = stop - self._lookback
        field_predicate = " or ".join(f'r["_field"] == {flux_str(f)}' for f in VOLTAGE_FIELDS)

        query = f"""
from(bucket: {flux_str(self._bucket)})
  |> range(start: time(v: {flux_str(to_rfc3339(start))}), stop: time(v: {flux_str(to_rfc3339(stop))}))
  |> filter(fn: (r) => r["_measurement"] == {flux_str(self._measurement)})
  |> filter(fn: (r) => {field_predicate})
  |> pivot(rowKey: ["_time"], columnKey: ["_field"], valueColumn: "_value")
  |> group()
  |> sort(columns: ["_time"], desc: true)
  |> limit(n: {int(limit)})
"""
        query_api = self._client.query_api()
        tables = query_api.query(query=query, org=self._org)

        results: list[MeasurementRecord] = []
        for table in tables:
            for row in table.records:
                values: dict[str, Any] = row.values
                ts = row.get_time()
                record_id = values.get("record_id")
                if ts is None or not isinstance(record_id, str):
                    continue
                try:
                    results.append(
                        MeasurementRecord(
                            id=record_id,
                            timestamp=ts,
                            min_voltage=float(values["min_voltage"]),
                            max_voltage=float(values["max_voltage"]),
                            avg_voltage=float(values["avg_voltage"]),
                            duration=str(values.get("duration") or ""),
                            operator=str(values.get("operator") or ""),
                        )
                    )
                except (KeyError, TypeError, ValueError):
                    continue
        return results
