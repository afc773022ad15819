"""
Conversion Controller
=====================
Combines the committed time, both selected locations and the reference date,
and re-derives the converted result whenever any of them changes.

Why is this file needed?
------------------------
1. Consistency: The result is always recomputed from the latest four inputs,
   never patched. If an input becomes unusable the result drops back to a
   placeholder instead of showing stale output.
2. Coalescing: A short debounce folds bursts of changes (e.g. a swap, or a
   selection followed by its field write) into a single recomputation.
3. Ownership: The two selection slots live here, together with the search
   pipelines that feed them and the store that persists them.

Classes:
    ConversionController: The application's top-level view model.
"""
from __future__ import annotations

from datetime import date, datetime, time
import logging
from typing import Dict, Optional, Tuple

from PySide6.QtCore import QObject, Signal

from clockpair.config import (
    CONVERSION_DEBOUNCE_MS, LOCATION1_FIELD, LOCATION2_FIELD, PLACEHOLDER_TIME, SEARCH_DEBOUNCE_MS, TIME_FIELD,
)
from clockpair.controller.scheduling import Debouncer
from clockpair.controller.search import SearchPipeline
from clockpair.controller.validation import ValidationEngine
from clockpair.model.locations import Location, LocationIndex
from clockpair.model.selection_store import SelectionStore
from clockpair.model.time_math import ConversionResult, convert, is_valid_time

logger = logging.getLogger(__name__)

SLOT_FIELDS: Dict[int, str] = {1: LOCATION1_FIELD, 2: LOCATION2_FIELD}


def placeholder_result(reference_date: date) -> ConversionResult:
    """Placeholder time on the reference date, in the local timezone."""
    instant = datetime.combine(reference_date, time()).astimezone()
    return ConversionResult(time=PLACEHOLDER_TIME, instant=instant, timezone=instant.tzinfo)


def current_time_text() -> str:
    return datetime.now().strftime("%H:%M")


class ConversionController(QObject):
    result_changed = Signal(object)  # ConversionResult
    selection_changed = Signal(int, object)  # (slot, Location | None)
    reference_date_changed = Signal(object)  # date

    def __init__(
        self,
        engine: ValidationEngine,
        index: LocationIndex,
        store: Optional[SelectionStore] = None,
        reference_date: Optional[date] = None,
        initial_time: Optional[str] = None,
        debounce_ms: int = CONVERSION_DEBOUNCE_MS,
        search_debounce_ms: int = SEARCH_DEBOUNCE_MS,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self.engine = engine
        self.index = index
        self.store = store
        self._reference_date: date = reference_date or date.today()
        self._selected: Dict[int, Optional[Location]] = {1: None, 2: None}

        if store is not None:
            self._selected[1], self._selected[2] = store.load(index)

        # --- FIELDS ---
        self.time_field = engine.register(TIME_FIELD, initial_time or current_time_text(), rule=is_valid_time)
        self.location_fields = {
            slot: engine.register(field_id, self._text_for(self._selected[slot]))
            for slot, field_id in SLOT_FIELDS.items()
        }

        # --- SEARCH ---
        self.searches: Dict[int, SearchPipeline] = {}
        for slot, field_id in SLOT_FIELDS.items():
            pipeline = SearchPipeline(
                engine, field_id, index,
                selected=lambda s=slot: self._selected[s],
                debounce_ms=search_debounce_ms,
                parent=self,
            )
            pipeline.location_selected.connect(lambda loc, s=slot: self.set_location(s, loc))
            self.searches[slot] = pipeline

        self._result: ConversionResult = placeholder_result(self._reference_date)
        self._debouncer = Debouncer(debounce_ms, self.refresh_now, parent=self)

        self.time_field.last_valid_changed.connect(lambda _value: self._schedule())
        engine.field_committed.connect(self._on_field_committed)

        # First result without waiting for the debounce
        self.refresh_now()

    # ------------------------------------------------------------------------------
    # Inputs
    # ------------------------------------------------------------------------------

    @staticmethod
    def _text_for(location: Optional[Location]) -> str:
        return location.canonical_text if location is not None else ""

    @property
    def reference_date(self) -> date:
        return self._reference_date

    def set_reference_date(self, value: date) -> None:
        if isinstance(value, datetime):
            value = value.date()
        if value == self._reference_date:
            return
        self._reference_date = value
        self.reference_date_changed.emit(value)
        self._schedule()

    def selected_location(self, slot: int) -> Optional[Location]:
        return self._selected[slot]

    def set_location(self, slot: int, location: Optional[Location]) -> None:
        """Replace a selection slot (whole value) and persist it."""
        if slot not in self._selected:
            raise ValueError(f"Unknown location slot: {slot}")
        if location == self._selected[slot]:
            return
        self._selected[slot] = location
        if self.store is not None:
            self.store.save(slot, location)
        self.selection_changed.emit(slot, location)
        self._schedule()

    def _on_field_committed(self, field_id: str, value: str) -> None:
        """Typed text that matches a known location updates that slot."""
        for slot, slot_field in SLOT_FIELDS.items():
            if slot_field != field_id:
                continue
            current = self._selected[slot]
            if current is not None and current.canonical_text == value:
                return
            location = self.index.find_by_text(value)
            if location is not None:
                self.set_location(slot, location)
            return

    def swap_locations(self) -> None:
        """
        Exchange both selections and both location fields in one step.
        Both fields stay judged, so nothing is re-validated or reverted.
        """
        first, second = self._selected[1], self._selected[2]
        self._selected[1], self._selected[2] = second, first
        self.engine.swap_fields(LOCATION1_FIELD, LOCATION2_FIELD)

        if self.store is not None:
            self.store.save(1, second)
            self.store.save(2, first)
        self.selection_changed.emit(1, second)
        self.selection_changed.emit(2, first)
        logger.debug("Swapped locations.")
        self._schedule()

    # ------------------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------------------

    @property
    def result(self) -> ConversionResult:
        return self._result

    @property
    def is_pending(self) -> bool:
        return self._debouncer.is_pending

    def inputs(self) -> Tuple[str, Optional[Location], Optional[Location], date]:
        return (self.time_field.last_valid, self._selected[1], self._selected[2], self._reference_date)

    def _schedule(self) -> None:
        self._debouncer.trigger()

    def compute(self) -> ConversionResult:
        """Derive the result from the current inputs (no side effects)."""
        time_text, source, target, reference_date = self.inputs()
        if source is None or target is None or not is_valid_time(time_text):
            return placeholder_result(reference_date)

        result = convert(time_text, source.timezone_identifier, target.timezone_identifier, reference_date)
        if result is None:
            return placeholder_result(reference_date)
        return result

    def refresh_now(self) -> None:
        self._debouncer.cancel()
        self._result = self.compute()
        logger.debug(f"Conversion result: {self._result.time} ({self._result.instant.isoformat()}).")
        self.result_changed.emit(self._result)
