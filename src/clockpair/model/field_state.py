"""
Input Field State
=================
Mutable record behind one logical input field (the time, or one of the two
locations).

Why is this file needed?
------------------------
Widgets only ever write keystrokes and focus flags into a FieldState; the
ValidationEngine decides what becomes committed. Keeping the record free of
rules means the same class serves every field.

Invariant: right after a commit, ``current_value == last_valid`` and
``needs_validation`` is False.
"""
from __future__ import annotations

from PySide6.QtCore import QObject, Signal


class FieldState(QObject):
    """Live text, last committed text and focus flag of a single field."""
    value_changed = Signal(str)
    last_valid_changed = Signal(str)
    focus_changed = Signal(bool)

    def __init__(self, field_id: str, default_value: str = "", parent: QObject | None = None) -> None:
        super().__init__(parent)
        self.field_id: str = field_id
        self._current_value: str = default_value
        self._last_valid: str = default_value
        self._is_focused: bool = False
        self.needs_validation: bool = False

    def __repr__(self) -> str:
        return (
            f"FieldState({self.field_id!r}, current={self._current_value!r}, "
            f"last_valid={self._last_valid!r}, needs_validation={self.needs_validation})"
        )

    # --- PROPERTIES ---

    @property
    def current_value(self) -> str:
        return self._current_value

    @current_value.setter
    def current_value(self, value: str) -> None:
        if value == self._current_value:
            return
        self._current_value = value
        self.value_changed.emit(value)

    @property
    def last_valid(self) -> str:
        return self._last_valid

    @last_valid.setter
    def last_valid(self, value: str) -> None:
        if value == self._last_valid:
            return
        self._last_valid = value
        self.last_valid_changed.emit(value)

    @property
    def is_focused(self) -> bool:
        return self._is_focused

    @is_focused.setter
    def is_focused(self, focused: bool) -> None:
        if focused == self._is_focused:
            return
        self._is_focused = focused
        self.focus_changed.emit(focused)

    @property
    def is_dirty(self) -> bool:
        """True while the live text differs from the committed text."""
        return self._current_value != self._last_valid

    # --- COMMIT PRIMITIVES (driven by the ValidationEngine) ---

    def accept(self) -> None:
        """Commit the live text."""
        self.needs_validation = False
        self.last_valid = self._current_value

    def revert(self) -> None:
        """Discard the live text and restore the committed text."""
        self.needs_validation = False
        self.current_value = self._last_valid

    def assign(self, value: str, last_valid: str | None = None) -> None:
        """
        Set both values at once and mark the field as judged.

        The committed value is written first, so listeners of `value_changed`
        already compare against the new `last_valid`.
        """
        self.needs_validation = False
        self.last_valid = value if last_valid is None else last_valid
        self.current_value = value
        # A listener may have flagged the field between the two writes
        self.needs_validation = False
