from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from weldwatch.models.measurement import STORE_ID_PREFIX
from weldwatch.services.history import HistoryStore, filter_by_day, resolve_timezone
from weldwatch.schemas.voltage import VoltageRow
from tests.fakes import FakeSink, make_record, make_row

WIB = timezone(timedelta(hours=7))


@pytest.mark.anyio
async def test_load_maps_store_rows() -> None:
    sink = FakeSink(
        [
            make_row(3, datetime(2026, 10, 19, 9, 0, tzinfo=timezone.utc), avg=24.0),
            make_row(2, datetime(2026, 10, 18, 9, 0, tzinfo=timezone.utc), avg=20.5),
        ]
    )
    store = HistoryStore(source=sink, limit=100)

    records = await store.load()

    assert sink.read_limits == [100]
    assert [r.id for r in records] == ["DB_3", "DB_2"]
    assert all(r.id.startswith(STORE_ID_PREFIX) for r in records)
    first = records[0]
    assert (first.min_voltage, first.max_voltage, first.avg_voltage) == (22.0, 26.0, 24.0)
    assert first.duration == "00:03"
    assert first.operator == "Admin"


@pytest.mark.anyio
async def test_load_keeps_row_duration_and_operator() -> None:
    row = VoltageRow(
        id="abc",
        timestamp=datetime(2026, 10, 19, 9, 0, tzinfo=timezone.utc),
        min_voltage=1.0,
        max_voltage=5.0,
        avg_voltage=3.0,
        duration="00:05",
        operator="Budi",
    )
    store = HistoryStore(source=FakeSink([row]))
    (record,) = await store.load()
    assert record.id == "DB_abc"
    assert record.duration == "00:05"
    assert record.operator == "Budi"


@pytest.mark.anyio
async def test_load_caps_to_limit_and_replaces_previous_set() -> None:
    ts = datetime(2026, 10, 19, 9, 0, tzinfo=timezone.utc)
    sink = FakeSink([make_row(i, ts) for i in range(5)])
    store = HistoryStore(source=sink, limit=3)

    assert len(await store.load()) == 3

    sink.rows = [make_row(99, ts)]
    assert [r.id for r in await store.load()] == ["DB_99"]
    assert [r.id for r in store.records] == ["DB_99"]


@pytest.mark.anyio
@pytest.mark.parametrize("malformed", [False, True])
async def test_failed_read_yields_empty_set(malformed: bool) -> None:
    sink = FakeSink([make_row(1, datetime(2026, 10, 19, 9, 0, tzinfo=timezone.utc))])
    store = HistoryStore(source=sink)
    assert len(await store.load()) == 1

    sink.fail_reads(malformed=malformed)
    assert await store.load() == []
    assert store.records == []


def test_filter_by_day_keeps_order() -> None:
    records = [
        make_record("a", datetime(2026, 10, 19, 10, 0, tzinfo=timezone.utc)),
        make_record("b", datetime(2026, 10, 18, 10, 0, tzinfo=timezone.utc)),
        make_record("c", datetime(2026, 10, 19, 1, 0, tzinfo=timezone.utc)),
    ]
    day_one = filter_by_day(records, date(2026, 10, 19), timezone.utc)
    assert [r.id for r in day_one] == ["a", "c"]
    assert filter_by_day(day_one, date(2026, 10, 19), timezone.utc) == day_one
    assert [r.id for r in filter_by_day(records, date(2026, 10, 18), timezone.utc)] == ["b"]
    assert filter_by_day(records, date(2026, 10, 17), timezone.utc) == []


def test_filter_uses_local_calendar_day_across_midnight() -> None:
    # 18:30 UTC on the 18th is 01:30 on the 19th in UTC+7.
    late = make_record("late", datetime(2026, 10, 18, 18, 30, tzinfo=timezone.utc))
    early = make_record("early", datetime(2026, 10, 18, 16, 59, 59, tzinfo=timezone.utc))

    assert [r.id for r in filter_by_day([late, early], date(2026, 10, 19), WIB)] == ["late"]
    assert [r.id for r in filter_by_day([late, early], date(2026, 10, 18), WIB)] == ["early"]


def test_filter_treats_naive_timestamps_as_local() -> None:
    naive = make_record("n", datetime(2026, 10, 19, 23, 59, 59))
    assert filter_by_day([naive], date(2026, 10, 19), WIB) == [naive]


def test_resolve_timezone_default_is_host_local() -> None:
    assert resolve_timezone(None) is None
    assert resolve_timezone("") is None
