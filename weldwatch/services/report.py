"""Printable report for a selection of voltage records.

The document is a self-contained HTML page rendered from ``report.html``:
letterhead, the record table, a blank annotation table and a signature
footer. It ends with a script that opens the browser's print dialog once the
page has loaded.
"""

from __future__ import annotations

import logging
import webbrowser
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date, datetime, tzinfo
from pathlib import Path
from typing import Protocol

from jinja2 import Environment, FileSystemLoader, select_autoescape

from weldwatch.models.measurement import MeasurementRecord
from weldwatch.services.history import to_local

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "web" / "templates"
REPORT_TEMPLATE = "report.html"

INDONESIAN_MONTHS = (
    "Januari",
    "Februari",
    "Maret",
    "April",
    "Mei",
    "Juni",
    "Juli",
    "Agustus",
    "September",
    "Oktober",
    "November",
    "Desember",
)


@dataclass(frozen=True)
class Letterhead:
    name: str = "POLITEKNIK PURBAYA"
    subtitle: str = "POLITEKNIK TEKNOPRENEUR"
    address_lines: tuple[str, ...] = (
        "Kampus I: Jl. Pancakarya No.1 Kajen, Talang – Tegal 52193",
        "Kampus II: Jl. Supriyadi No. 72 Trayeman, Slawi – Tegal 52414",
        "Telp. (0283) 4546201, HP: 0821 1146 0080",
    )
    website: str = "www.purbaya.ac.id"
    email: str = "info@purbaya.ac.id"
    place: str = "Tegal"
    logo_url: str = "/static/logo.svg"
    signatory: str = "Operator Praktik Pengelasan"


@dataclass(frozen=True)
class ReportRow:
    id: str
    time: str
    min_voltage: str
    max_voltage: str
    avg_voltage: str
    duration: str
    operator: str


@dataclass(frozen=True)
class ReportDocument:
    html: str
    report_date: date
    rendered_at: datetime
    rows: tuple[ReportRow, ...] = field(default_factory=tuple)

    @property
    def filename(self) -> str:
        return f"report-{self.rendered_at:%Y%m%d-%H%M%S}.html"


class PrintSink(Protocol):
    def write(self, document: ReportDocument) -> None: ...

    def print_now(self) -> None: ...


class CapturePrintSink:
    """Keeps the document so a web handler can return it."""

    def __init__(self) -> None:
        self.document: ReportDocument | None = None
        self.printed = False

    def write(self, document: ReportDocument) -> None:
        self.document = document

    def print_now(self) -> None:
        self.printed = self.document is not None


class FilePrintSink:
    def __init__(self, directory: Path, *, open_browser: bool = False) -> None:
        self._directory = Path(directory)
        self._open_browser = open_browser
        self.path: Path | None = None

    def write(self, document: ReportDocument) -> None:
        self._directory.mkdir(parents=True, exist_ok=True)
        self.path = self._directory / document.filename
        self.path.write_text(document.html, encoding="utf-8")

    def print_now(self) -> None:
        if self.path is None:
            return
        logger.info("Report written to %s", self.path)
        if self._open_browser:
            webbrowser.open(self.path.resolve().as_uri())


def format_voltage(value: float) -> str:
    return f"{value:.1f}"


def format_long_date(day: date) -> str:
    return f"{day.day:02d} {INDONESIAN_MONTHS[day.month - 1]} {day.year}"


class ReportRenderer:
    def __init__(
        self,
        *,
        letterhead: Letterhead | None = None,
        tz: tzinfo | None = None,
        templates_dir: Path = TEMPLATES_DIR,
    ) -> None:
        self._letterhead = letterhead or Letterhead()
        self._tz = tz
        self._env = Environment(
            loader=FileSystemLoader(str(templates_dir)),
            autoescape=select_autoescape(["html"]),
            keep_trailing_newline=True,
        )

    def rows(self, records: Sequence[MeasurementRecord]) -> tuple[ReportRow, ...]:
        return tuple(
            ReportRow(
                id=r.id,
                time=f"{to_local(r.timestamp, self._tz):%d/%m/%Y %H:%M:%S}",
                min_voltage=format_voltage(r.min_voltage),
                max_voltage=format_voltage(r.max_voltage),
                avg_voltage=format_voltage(r.avg_voltage),
                duration=r.duration,
                operator=r.operator,
            )
            for r in records
        )

    def render(
        self,
        records: Sequence[MeasurementRecord],
        *,
        report_date: date,
        rendered_at: datetime,
    ) -> ReportDocument:
        rows = self.rows(records)
        html = self._env.get_template(REPORT_TEMPLATE).render(
            letterhead=self._letterhead,
            rows=rows,
            report_date=f"{report_date:%d/%m/%Y}",
            signed_on=format_long_date(to_local(rendered_at, self._tz).date()),
        )
        return ReportDocument(
            html=html, report_date=report_date, rendered_at=rendered_at, rows=rows
        )


def emit(document: ReportDocument, sink: PrintSink) -> None:
    sink.write(document)
    sink.print_now()
