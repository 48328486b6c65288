from __future__ import annotations

from collections.abc import Iterable

from weldwatch.models.measurement import MeasurementRecord


class SelectionSet:
    """Record ids marked for the report, kept in selection order."""

    def __init__(self) -> None:
        self._ids: dict[str, None] = {}

    def __contains__(self, record_id: object) -> bool:
        return record_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    @property
    def ids(self) -> list[str]:
        return list(self._ids)

    def toggle(self, record_id: str) -> bool:
        """Flip membership; returns whether the id is now selected."""
        if record_id in self._ids:
            del self._ids[record_id]
            return False
        self._ids[record_id] = None
        return True

    def toggle_all(self, filtered: Iterable[MeasurementRecord]) -> None:
        filtered_ids = [r.id for r in filtered]
        if len(self._ids) == len(filtered_ids):
            self._ids.clear()
        else:
            self._ids = dict.fromkeys(filtered_ids)

    def prune(self, visible_ids: Iterable[str]) -> list[str]:
        """Drop ids that are not visible; returns the dropped ids."""
        visible = set(visible_ids)
        dropped = [i for i in self._ids if i not in visible]
        for record_id in dropped:
            del self._ids[record_id]
        return dropped

