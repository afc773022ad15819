"""
Location Search
===============
Debounced suggestion list for a location field, plus keyboard navigation over
that list.

Why is this file needed?
------------------------
1. Responsiveness: Searching on every keystroke is wasteful. A restartable
   single-shot timer means only the last query of a typing burst runs.
2. Round-trip suppression: After a suggestion is picked, its canonical text is
   written back into the field. That write must not reopen the dropdown, so a
   query equal to the selected location's text yields no suggestions.

Classes:
    SearchPipeline: Live text -> bounded list of matching locations.
    SuggestionCursor: Highlighted row tracking (up / down / return / escape).
"""
from __future__ import annotations

import logging
from typing import Callable, List, Optional

from PySide6.QtCore import QObject, Signal

from clockpair.config import MAX_SUGGESTIONS, SEARCH_DEBOUNCE_MS
from clockpair.controller.scheduling import Debouncer
from clockpair.controller.validation import ValidationEngine
from clockpair.model.locations import Location, LocationIndex

logger = logging.getLogger(__name__)


class SearchPipeline(QObject):
    results_changed = Signal(object)  # list[Location]
    location_selected = Signal(object)  # Location

    def __init__(
        self,
        engine: ValidationEngine,
        field_id: str,
        index: LocationIndex,
        selected: Callable[[], Optional[Location]],
        debounce_ms: int = SEARCH_DEBOUNCE_MS,
        limit: int = MAX_SUGGESTIONS,
        parent: QObject | None = None,
    ) -> None:
        """
        Args:
            engine: Validation engine that owns the field.
            field_id: Location field to watch (must already be registered).
            index: Dataset to search.
            selected: Returns the slot's currently selected Location.
            debounce_ms: Quiet period before a query runs.
            limit: Maximum number of suggestions.
        """
        super().__init__(parent)
        self.engine = engine
        self.field_id = field_id
        self.index = index
        self.limit = limit
        self._selected = selected
        self._results: List[Location] = []

        self._debouncer = Debouncer(debounce_ms, self._run_query, parent=self)

        state = engine.field(field_id)
        if state is None:
            raise ValueError(f"Field '{field_id}' must be registered before attaching a search.")
        self._state = state
        state.value_changed.connect(self._on_text_changed)

    @property
    def results(self) -> List[Location]:
        return list(self._results)

    @property
    def is_pending(self) -> bool:
        return self._debouncer.is_pending

    def _on_text_changed(self, _text: str) -> None:
        self._debouncer.trigger()

    def matches_for(self, query: str) -> List[Location]:
        """The suggestion list for `query` (no debounce)."""
        if not query:
            return []
        selected = self._selected()
        if selected is not None and query == selected.canonical_text:
            return []
        return self.index.search(query, limit=self.limit)

    def _run_query(self) -> None:
        self._publish(self.matches_for(self._state.current_value))

    def _publish(self, results: List[Location]) -> None:
        self._results = results
        self.results_changed.emit(list(results))

    def flush(self) -> None:
        """Run a pending query now."""
        self._debouncer.flush()

    def clear(self) -> None:
        self._debouncer.cancel()
        if self._results:
            self._publish([])

    def select(self, location: Location) -> None:
        """Commit `location` through the programmatic path and close the list."""
        logger.debug(f"Selected '{location.canonical_text}' for field '{self.field_id}'.")
        self.location_selected.emit(location)
        self.engine.set_field_value(self.field_id, location.canonical_text)
        # The write above restarted the debounce; the list closes now instead
        self.clear()


class SuggestionCursor(QObject):
    """Keyboard highlight over the visible part of a SearchPipeline's results."""
    highlight_changed = Signal(int)

    def __init__(self, pipeline: SearchPipeline, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self.pipeline = pipeline
        self._index = 0
        pipeline.results_changed.connect(lambda _results: self.reset())

    @property
    def index(self) -> int:
        return self._index

    def _visible(self) -> List[Location]:
        return self.pipeline.results[:self.pipeline.limit]

    def _set_index(self, index: int) -> None:
        if index != self._index:
            self._index = index
            self.highlight_changed.emit(index)

    def reset(self) -> None:
        self._set_index(0)

    def move_down(self) -> bool:
        visible = self._visible()
        if not visible:
            return False
        self._set_index(min(self._index + 1, len(visible) - 1))
        return True

    def move_up(self) -> bool:
        if not self._visible():
            return False
        self._set_index(max(self._index - 1, 0))
        return True

    def highlight(self, index: int) -> None:
        """Hover support: move the highlight to a specific row."""
        visible = self._visible()
        if 0 <= index < len(visible):
            self._set_index(index)

    def current(self) -> Optional[Location]:
        visible = self._visible()
        if 0 <= self._index < len(visible):
            return visible[self._index]
        return None

    def accept(self) -> bool:
        """Select the highlighted row. Returns False if nothing is shown."""
        location = self.current()
        if location is None:
            return False
        self.pipeline.select(location)
        return True

    def dismiss(self) -> None:
        self.pipeline.clear()
        self.reset()
