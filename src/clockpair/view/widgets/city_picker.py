"""
City Picker Widget
==================
Text box with a suggestion dropdown for one location field.

The widget holds no state of its own beyond what is on screen: keystrokes go
into the FieldState, the dropdown mirrors the SearchPipeline, and keyboard
navigation goes through the SuggestionCursor.
"""
from __future__ import annotations

from typing import List, Optional

from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QFocusEvent, QKeyEvent
from PySide6.QtWidgets import QLineEdit, QListWidget, QListWidgetItem, QVBoxLayout, QWidget

from clockpair.controller.search import SearchPipeline, SuggestionCursor
from clockpair.model.field_state import FieldState
from clockpair.model.locations import Location

ROW_HEIGHT = 32
MAX_DROPDOWN_HEIGHT = 160


class FocusLineEdit(QLineEdit):
    """QLineEdit that reports focus changes and navigation keys as signals."""
    focus_gained = Signal()
    focus_lost = Signal()
    navigation_key = Signal(int)  # Qt.Key

    NAVIGATION_KEYS = (Qt.Key_Up, Qt.Key_Down, Qt.Key_Return, Qt.Key_Enter, Qt.Key_Escape)

    def focusInEvent(self, event: QFocusEvent) -> None:
        super().focusInEvent(event)
        self.focus_gained.emit()

    def focusOutEvent(self, event: QFocusEvent) -> None:
        super().focusOutEvent(event)
        self.focus_lost.emit()

    def keyPressEvent(self, event: QKeyEvent) -> None:
        if event.key() in self.NAVIGATION_KEYS:
            self.navigation_key.emit(event.key())
            event.accept()
            return
        super().keyPressEvent(event)


class CityPicker(QWidget):
    def __init__(self, state: FieldState, pipeline: SearchPipeline, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.state = state
        self.pipeline = pipeline
        self.cursor = SuggestionCursor(pipeline, parent=self)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)

        self.edit = FocusLineEdit(state.current_value)
        self.edit.setPlaceholderText("Search city...")
        layout.addWidget(self.edit)

        self.dropdown = QListWidget()
        self.dropdown.setVisible(False)
        self.dropdown.setFocusPolicy(Qt.NoFocus)
        layout.addWidget(self.dropdown)
        layout.addStretch()

        # --- CONNECTIONS ---
        self.edit.textEdited.connect(self.on_text_edited)
        self.edit.focus_gained.connect(lambda: self._set_focused(True))
        self.edit.focus_lost.connect(lambda: self._set_focused(False))
        self.edit.navigation_key.connect(self.on_navigation_key)

        state.value_changed.connect(self.on_value_changed)
        state.last_valid_changed.connect(lambda _v: self._update_border())
        pipeline.results_changed.connect(self.on_results_changed)
        self.cursor.highlight_changed.connect(self.dropdown.setCurrentRow)
        self.dropdown.itemClicked.connect(self.on_item_clicked)

        self._update_border()

    # --- SLOTS ---

    def on_text_edited(self, text: str) -> None:
        self.state.current_value = text

    def on_value_changed(self, value: str) -> None:
        if self.edit.text() != value:
            self.edit.setText(value)
        self._update_border()

    def on_results_changed(self, results: List[Location]) -> None:
        self.dropdown.clear()
        for loc in results:
            item = QListWidgetItem(loc.canonical_text)
            item.setData(Qt.UserRole, loc)
            self.dropdown.addItem(item)
        if results:
            self.dropdown.setCurrentRow(self.cursor.index)
        self._update_expansion()

    def on_item_clicked(self, item: QListWidgetItem) -> None:
        self.pipeline.select(item.data(Qt.UserRole))
        self.edit.clearFocus()

    def on_navigation_key(self, key: int) -> None:
        if key == Qt.Key_Down:
            self.cursor.move_down()
        elif key == Qt.Key_Up:
            self.cursor.move_up()
        elif key in (Qt.Key_Return, Qt.Key_Enter):
            if self.dropdown.isVisible() and self.cursor.accept():
                self.edit.clearFocus()
        elif key == Qt.Key_Escape:
            self.cursor.dismiss()
            self.edit.clearFocus()

    # --- HELPERS ---

    def _set_focused(self, focused: bool) -> None:
        self.state.is_focused = focused
        self._update_expansion()

    def _update_expansion(self) -> None:
        count = self.dropdown.count()
        expand = count > 0 and self.edit.hasFocus()
        self.dropdown.setFixedHeight(min(count * ROW_HEIGHT, MAX_DROPDOWN_HEIGHT))
        self.dropdown.setVisible(expand)

    def _update_border(self) -> None:
        color = "#999999" if not self.state.is_dirty else "#d9534f"
        self.edit.setStyleSheet(f"QLineEdit {{ border: 1px solid {color}; border-radius: 6px; padding: 6px; }}")
