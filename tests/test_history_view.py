from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from weldwatch.services.history import HistoryStore
from weldwatch.services.history_view import HistoryView
from weldwatch.services.report import CapturePrintSink, ReportRenderer
from tests.fakes import FakeSink, make_row

DAY_ONE = date(2026, 10, 19)
DAY_TWO = date(2026, 10, 18)
RENDERED_AT = datetime(2026, 10, 20, 1, 0, tzinfo=timezone.utc)


def _at(day: date, hour: int) -> datetime:
    return datetime(day.year, day.month, day.day, hour, 0, tzinfo=timezone.utc)


def _view(rows) -> HistoryView:
    store = HistoryStore(source=FakeSink(rows), limit=100)
    view = HistoryView(store=store, renderer=ReportRenderer(tz=timezone.utc), tz=timezone.utc)
    view.set_day(DAY_ONE)
    return view


@pytest.fixture()
def day_rows():
    return [
        make_row(5, _at(DAY_ONE, 12)),
        make_row(4, _at(DAY_ONE, 11), avg=23.4),
        make_row(3, _at(DAY_TWO, 10)),
        make_row(2, _at(DAY_ONE, 9), avg=18.0),
        make_row(1, _at(DAY_ONE, 8)),
        make_row(0, _at(DAY_ONE, 7)),
    ]


@pytest.mark.anyio
async def test_filtered_view_for_day(day_rows) -> None:
    view = _view(day_rows)
    assert not view.loaded
    await view.activate()
    assert view.loaded
    assert [r.id for r in view.filtered] == ["DB_5", "DB_4", "DB_2", "DB_1", "DB_0"]

    view.set_day(DAY_TWO)
    assert [r.id for r in view.filtered] == ["DB_3"]


@pytest.mark.anyio
async def test_print_selected_records_in_filtered_order(day_rows) -> None:
    view = _view(day_rows)
    await view.activate()

    assert view.toggle("DB_2")
    assert view.toggle("DB_4")
    assert view.can_print

    sink = CapturePrintSink()
    doc = view.print_report(sink, rendered_at=RENDERED_AT)

    assert doc is not None
    assert sink.document is doc and sink.printed
    assert [r.id for r in doc.rows] == ["DB_4", "DB_2"]
    assert [r.avg_voltage for r in doc.rows] == ["23.4", "18.0"]
    assert all(len(r.min_voltage.split(".")[1]) == 1 for r in doc.rows)
    assert doc.report_date == DAY_ONE


@pytest.mark.anyio
async def test_print_is_disabled_without_selection(day_rows) -> None:
    view = _view(day_rows)
    await view.activate()
    sink = CapturePrintSink()

    assert not view.can_print
    assert view.print_report(sink, rendered_at=RENDERED_AT) is None
    assert sink.document is None and not sink.printed


@pytest.mark.anyio
async def test_toggle_outside_view_is_ignored(day_rows) -> None:
    view = _view(day_rows)
    await view.activate()
    assert view.toggle("DB_3") is False
    assert view.toggle("WLD_1") is False
    assert len(view.selection) == 0


@pytest.mark.anyio
async def test_changing_day_prunes_stale_selection(day_rows) -> None:
    view = _view(day_rows)
    await view.activate()
    view.toggle_all()
    assert view.all_selected
    assert len(view.selection) == 5

    view.set_day(DAY_TWO)
    assert len(view.selection) == 0
    assert not view.can_print

    view.toggle("DB_3")
    view.set_day(DAY_ONE)
    assert view.selected == []


@pytest.mark.anyio
async def test_toggle_all_is_involution(day_rows) -> None:
    view = _view(day_rows)
    await view.activate()

    view.toggle_all()
    view.toggle_all()
    assert len(view.selection) == 0

    view.toggle("DB_5")
    view.toggle_all()
    assert view.all_selected
    view.toggle_all()
    view.toggle_all()
    assert view.all_selected


@pytest.mark.anyio
async def test_reload_failure_empties_view_and_selection(day_rows) -> None:
    sink = FakeSink(day_rows)
    view = HistoryView(
        store=HistoryStore(source=sink), renderer=ReportRenderer(tz=timezone.utc), tz=timezone.utc
    )
    view.set_day(DAY_ONE)
    await view.activate()
    view.toggle("DB_5")

    sink.fail_reads()
    assert await view.activate() == []
    assert view.filtered == []
    assert len(view.selection) == 0
    assert view.print_report(CapturePrintSink(), rendered_at=RENDERED_AT) is None


def test_default_day_is_today() -> None:
    view = HistoryView(
        store=HistoryStore(source=FakeSink()),
        renderer=ReportRenderer(),
        tz=timezone(timedelta(hours=7)),
    )
    assert view.selected_day == datetime.now(timezone(timedelta(hours=7))).date()
