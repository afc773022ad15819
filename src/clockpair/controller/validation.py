"""
Input Validation Engine
=======================
Decides, for every registered input field, when typed text becomes committed
and when it snaps back to the last valid value.

Why is this file needed?
------------------------
1. Focus protocol: Tabbing away from a field commits it (valid) or reverts it
   (invalid). When focus moves from field B to field A, B is judged before A's
   gain of focus is published.
2. Deferred handling: Focus events are processed on the next event-loop tick
   so that a text write still in flight from the widget lands first.
3. Two commit paths: Typed text is checked against the field's rule, while
   `set_field_value` (suggestion picked from a list) commits without a check.

Classes:
    ValidationEngine: Owns the FieldState instances and their rules.
"""
from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional

from PySide6.QtCore import QObject, Signal

from clockpair.controller.scheduling import defer
from clockpair.model.field_state import FieldState
from clockpair.model.locations import LocationIndex

logger = logging.getLogger(__name__)

ValidationRule = Callable[[str], bool]


def non_empty(value: str) -> bool:
    return bool(value)


def city_country_shape(value: str) -> bool:
    """Structural location check: "<city>, <country>" with both parts non-empty."""
    parts = value.split(",")
    if len(parts) < 2:
        return False
    return bool(parts[0].strip()) and bool(parts[1].strip())


def is_location_field(field_id: str) -> bool:
    return "location" in field_id


class ValidationEngine(QObject):
    """
    Central registry of input fields.
    All mutations happen on the GUI thread; focus handling is deferred by one tick.
    """
    field_committed = Signal(str, str)  # (field_id, committed value)
    field_reverted = Signal(str, str)  # (field_id, restored value)
    focused_field_changed = Signal(object)  # field_id or None

    def __init__(self, location_index: Optional[LocationIndex] = None, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self.location_index = location_index
        self._fields: Dict[str, FieldState] = {}
        self._rules: Dict[str, ValidationRule] = {}
        self._focused_field_id: Optional[str] = None

    # ------------------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------------------

    def register(self, field_id: str, default_value: str = "", rule: Optional[ValidationRule] = None) -> FieldState:
        """Register a field. Re-registering an existing id returns it unchanged."""
        existing = self._fields.get(field_id)
        if existing is not None:
            return existing

        state = FieldState(field_id, default_value, parent=self)
        self._fields[field_id] = state
        if rule is not None:
            self._rules[field_id] = rule

        state.value_changed.connect(lambda _value, fid=field_id: self._on_value_changed(fid))
        state.focus_changed.connect(lambda focused, fid=field_id: self._on_focus_changed(fid, focused))

        logger.debug(f"Registered field '{field_id}' with default {default_value!r}.")
        return state

    def remove_field(self, field_id: str) -> None:
        state = self._fields.pop(field_id, None)
        self._rules.pop(field_id, None)
        if state is None:
            return
        state.value_changed.disconnect()
        state.focus_changed.disconnect()
        if self._focused_field_id == field_id:
            self._focused_field_id = None
        state.deleteLater()

    def field(self, field_id: str) -> Optional[FieldState]:
        return self._fields.get(field_id)

    def field_ids(self) -> List[str]:
        return list(self._fields)

    # ------------------------------------------------------------------------------
    # Rules
    # ------------------------------------------------------------------------------

    def _default_rule(self, field_id: str) -> ValidationRule:
        if is_location_field(field_id):
            if self.location_index is not None:
                return self.location_index.contains_text
            return city_country_shape
        return non_empty

    def is_valid(self, field_id: str, value: str) -> bool:
        rule = self._rules.get(field_id) or self._default_rule(field_id)
        return rule(value)

    # ------------------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------------------

    def _on_value_changed(self, field_id: str) -> None:
        state = self._fields.get(field_id)
        if state is None:
            return
        if state.current_value != state.last_valid:
            state.needs_validation = True

    def _on_focus_changed(self, field_id: str, focused: bool) -> None:
        if focused:
            defer(lambda: self._handle_focus_gained(field_id))
        else:
            defer(lambda: self._handle_focus_lost(field_id))

    def _handle_focus_gained(self, field_id: str) -> None:
        if field_id not in self._fields:
            return
        previous = self._focused_field_id
        self._focused_field_id = field_id

        # The field we are leaving must be judged before the new focus is published
        if previous is not None and previous != field_id:
            self._validate_and_commit(previous)

        self.focused_field_changed.emit(field_id)

    def _handle_focus_lost(self, field_id: str) -> None:
        if self._focused_field_id == field_id:
            self._focused_field_id = None
            self.focused_field_changed.emit(None)

        self._validate_and_commit(field_id)

    # ------------------------------------------------------------------------------
    # Commit procedure
    # ------------------------------------------------------------------------------

    def _validate_and_commit(self, field_id: str, force: bool = False) -> None:
        """Commit the live text if it passes the rule, otherwise revert it."""
        state = self._fields.get(field_id)
        if state is None:
            logger.debug(f"Commit requested for unregistered field '{field_id}'.")
            return
        if not state.needs_validation and not force:
            return

        value = state.current_value
        if self.is_valid(field_id, value):
            state.accept()
            logger.debug(f"Field '{field_id}' committed {value!r}.")
            self.field_committed.emit(field_id, value)
        else:
            state.revert()
            logger.debug(f"Field '{field_id}' rejected {value!r}, reverted to {state.last_valid!r}.")
            self.field_reverted.emit(field_id, state.last_valid)

    def commit_field(self, field_id: str) -> None:
        """Judge a field now, regardless of focus (e.g. on submit)."""
        self._validate_and_commit(field_id, force=True)

    def validate_all_fields(self) -> None:
        for field_id in list(self._fields):
            self._validate_and_commit(field_id, force=True)

    def set_field_value(self, field_id: str, value: str) -> None:
        """
        Programmatic commit. The caller guarantees validity (e.g. the canonical
        text of a real Location), so the rule is not consulted.
        """
        state = self._fields.get(field_id)
        if state is None:
            logger.debug(f"set_field_value on unregistered field '{field_id}'.")
            return
        state.assign(value)
        logger.debug(f"Field '{field_id}' set to {value!r}.")
        self.field_committed.emit(field_id, value)

    def swap_fields(self, first_id: str, second_id: str) -> None:
        """Exchange the committed values of two fields; both end up clean and judged."""
        first = self._fields.get(first_id)
        second = self._fields.get(second_id)
        if first is None or second is None:
            logger.debug(f"swap_fields with unregistered field(s) '{first_id}', '{second_id}'.")
            return

        # Only committed values travel; an unsaved edit in either field is dropped
        first_value, second_value = first.last_valid, second.last_valid
        first.assign(second_value)
        second.assign(first_value)

    # ------------------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------------------

    @property
    def focused_field_id(self) -> Optional[str]:
        return self._focused_field_id

    @property
    def has_invalid_focused_field(self) -> bool:
        if self._focused_field_id is None:
            return False
        state = self._fields.get(self._focused_field_id)
        if state is None:
            return False
        return not self.is_valid(self._focused_field_id, state.current_value)

    @property
    def invalid_field_ids(self) -> List[str]:
        return [
            field_id for field_id, state in self._fields.items()
            if not self.is_valid(field_id, state.current_value)
        ]
