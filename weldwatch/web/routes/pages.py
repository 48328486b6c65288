from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Annotated

from fastapi import APIRouter, Form, Query, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from weldwatch.api.deps import History, Monitoring
from weldwatch.services.history import to_local
from weldwatch.services.report import CapturePrintSink, FilePrintSink, PrintSink
from weldwatch.web.jinja import templates

router = APIRouter()

HISTORY_URL = "/ui/history"


def _back_to_history() -> RedirectResponse:
    return RedirectResponse(HISTORY_URL, status_code=303)


@router.get("/", include_in_schema=False)
def ui_index():
    return _back_to_history()


@router.get("/history", include_in_schema=False)
async def history_page(
    request: Request,
    view: History,
    monitoring: Monitoring,
    day: Annotated[date | None, Query()] = None,
):
    if not view.loaded:
        await view.activate()
    if day is not None:
        view.set_day(day)

    settings = request.app.state.settings
    tz = view.tz
    rows = [
        {
            "record": r,
            "time": f"{to_local(r.timestamp, tz):%d/%m/%Y %H:%M:%S}",
            "selected": r.id in view.selection,
        }
        for r in view.filtered
    ]
    return templates.TemplateResponse(
        request,
        "history.html",
        {
            "request": request,
            "title": "Riwayat Data Pengelasan",
            "day": view.selected_day,
            "rows": rows,
            "all_selected": view.all_selected and bool(rows),
            "selected_count": len(view.selection),
            "can_print": view.can_print,
            "monitoring": monitoring.status(),
            "operator": settings.operator_name,
        },
    )


@router.post("/history/reload", include_in_schema=False)
async def reload_history(view: History):
    await view.activate()
    return _back_to_history()


@router.post("/history/toggle", include_in_schema=False)
async def toggle_record(
    view: History,
    record_id: Annotated[str, Form(min_length=1, max_length=128)],
):
    view.toggle(record_id)
    return _back_to_history()


@router.post("/history/toggle-all", include_in_schema=False)
async def toggle_all_records(view: History):
    view.toggle_all()
    return _back_to_history()


@router.get("/history/print", include_in_schema=False)
async def print_report(request: Request, view: History):
    report_dir = request.app.state.settings.report_dir
    # with a report directory configured, every printed report is also kept on disk
    sink: PrintSink = FilePrintSink(report_dir) if report_dir is not None else CapturePrintSink()
    document = view.print_report(sink, rendered_at=datetime.now(tz=timezone.utc))
    if document is None:
        return _back_to_history()
    return HTMLResponse(document.html)


@router.post("/monitoring/on", include_in_schema=False)
async def monitoring_on(monitoring: Monitoring):
    await monitoring.turn_on()
    return _back_to_history()


@router.post("/monitoring/off", include_in_schema=False)
async def monitoring_off(monitoring: Monitoring):
    await monitoring.turn_off()
    return _back_to_history()
