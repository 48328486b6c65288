from __future__ import annotations

import logging
from datetime import date, datetime, tzinfo

from weldwatch.models.measurement import MeasurementRecord
from weldwatch.services.history import HistoryStore, filter_by_day, local_today
from weldwatch.services.report import PrintSink, ReportDocument, ReportRenderer, emit
from weldwatch.services.selection import SelectionSet

logger = logging.getLogger(__name__)


class HistoryView:
    """State behind the operator's history screen.

    Records are loaded once per activation. The filtered list is recomputed on
    demand, and every change of the visible set prunes selections that are no
    longer visible, so the print action only ever covers what is on screen.
    """

    def __init__(
        self,
        *,
        store: HistoryStore,
        renderer: ReportRenderer,
        tz: tzinfo | None = None,
    ) -> None:
        self._store = store
        self._renderer = renderer
        self._tz = tz
        self._day = local_today(tz)
        self._loaded = False
        self.selection = SelectionSet()

    @property
    def tz(self) -> tzinfo | None:
        return self._tz

    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def selected_day(self) -> date:
        return self._day

    @property
    def filtered(self) -> list[MeasurementRecord]:
        return filter_by_day(self._store.records, self._day, self._tz)

    @property
    def selected(self) -> list[MeasurementRecord]:
        return [r for r in self.filtered if r.id in self.selection]

    @property
    def all_selected(self) -> bool:
        return len(self.selection) == len(self.filtered)

    @property
    def can_print(self) -> bool:
        return len(self.selection) > 0

    async def activate(self) -> list[MeasurementRecord]:
        await self._store.load()
        self._loaded = True
        self._prune()
        return self.filtered

    def set_day(self, day: date) -> None:
        if day == self._day:
            return
        self._day = day
        self._prune()

    def toggle(self, record_id: str) -> bool:
        if record_id not in {r.id for r in self.filtered}:
            logger.debug("Ignoring toggle of %s, not in view", record_id, extra={"record_id": record_id})
            return False
        self.selection.toggle(record_id)
        return True

    def toggle_all(self) -> None:
        self.selection.toggle_all(self.filtered)

    def print_report(self, sink: PrintSink, *, rendered_at: datetime) -> ReportDocument | None:
        if not self.can_print:
            return None
        document = self._renderer.render(
            self.selected, report_date=self._day, rendered_at=rendered_at
        )
        emit(document, sink)
        logger.info("Printed report with %d records", len(document.rows), extra={"count": len(document.rows)})
        return document

    def _prune(self) -> None:
        dropped = self.selection.prune(r.id for r in self.filtered)
        if dropped:
            logger.debug("Dropped %d selections outside the visible day", len(dropped))
