"""
Split Hour/Minute Time Entry
"""
from __future__ import annotations

from PySide6.QtCore import QObject, Signal

from clockpair.controller.validation import ValidationEngine
from clockpair.model.field_state import FieldState


def _sanitize(text: str, maximum: int) -> str:
    """Digits only, the two most recent ones, clamped to `maximum`."""
    digits = "".join(ch for ch in text if ch in "0123456789")
    if not digits:
        return ""
    digits = digits[-2:]
    if int(digits) > maximum:
        return f"{maximum:02d}"
    return digits


def sanitize_hour(text: str) -> str:
    return _sanitize(text, 23)


def sanitize_minute(text: str) -> str:
    return _sanitize(text, 59)


class TimeInputComposer(QObject):
    """
    Keeps the hour and minute boxes of the time field in sync with its FieldState.

    Every edit composes ``HH:mm`` (missing parts read as 00) and writes it as
    the field's live text. Committing is left to the ValidationEngine.
    """
    hour_text_changed = Signal(str)
    minute_text_changed = Signal(str)
    advance_requested = Signal()

    def __init__(self, engine: ValidationEngine, field_id: str, parent: QObject | None = None) -> None:
        super().__init__(parent)
        state = engine.field(field_id)
        if state is None:
            raise ValueError(f"Field '{field_id}' must be registered before attaching a time input.")
        self.state: FieldState = state
        self.hour_text = ""
        self.minute_text = ""
        self.load(state.current_value)
        state.value_changed.connect(self.load)

    def load(self, value: str) -> None:
        """Split a field value back into its two boxes (e.g. after a revert)."""
        parts = value.split(":")
        if len(parts) != 2:
            return
        if parts[0] != self.hour_text:
            self.hour_text = parts[0]
            self.hour_text_changed.emit(self.hour_text)
        if parts[1] != self.minute_text:
            self.minute_text = parts[1]
            self.minute_text_changed.emit(self.minute_text)

    def compose(self) -> str:
        hour = f"{int(self.hour_text):02d}" if self.hour_text else "00"
        minute = f"{int(self.minute_text):02d}" if self.minute_text else "00"
        return f"{hour}:{minute}"

    def set_hour_text(self, text: str) -> str:
        cleaned = sanitize_hour(text)
        advance = len(cleaned) == 2
        # A lone 3-9 cannot start a two-digit hour
        if len(cleaned) == 1 and int(cleaned) >= 3:
            cleaned = f"0{cleaned}"
            advance = True

        self.hour_text = cleaned
        self.hour_text_changed.emit(cleaned)
        self.state.current_value = self.compose()
        if advance:
            self.advance_requested.emit()
        return cleaned

    def set_minute_text(self, text: str) -> str:
        cleaned = sanitize_minute(text)
        self.minute_text = cleaned
        self.minute_text_changed.emit(cleaned)
        self.state.current_value = self.compose()
        return cleaned
