"""
Time Input Widget
=================
Two large digit boxes (hours, minutes) bound to the time field through a
TimeInputComposer.
"""
from __future__ import annotations

from typing import Optional

from PySide6.QtCore import Qt
from PySide6.QtGui import QFont
from PySide6.QtWidgets import QApplication, QHBoxLayout, QLabel, QLineEdit, QWidget

from clockpair.controller.time_input import TimeInputComposer


class TimeInput(QWidget):
    def __init__(self, composer: TimeInputComposer, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.composer = composer

        font = QFont()
        font.setPointSize(36)
        font.setBold(True)

        layout = QHBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(4)

        self.hour_edit = self._make_box(font, composer.hour_text)
        self.minute_edit = self._make_box(font, composer.minute_text)

        colon = QLabel(":")
        colon.setFont(font)

        layout.addWidget(self.hour_edit)
        layout.addWidget(colon)
        layout.addWidget(self.minute_edit)
        layout.addStretch()

        # --- CONNECTIONS ---
        self.hour_edit.textEdited.connect(composer.set_hour_text)
        self.minute_edit.textEdited.connect(composer.set_minute_text)
        composer.hour_text_changed.connect(lambda t: self._sync(self.hour_edit, t))
        composer.minute_text_changed.connect(lambda t: self._sync(self.minute_edit, t))
        composer.advance_requested.connect(self.minute_edit.setFocus)

        # Both boxes together form one logical field
        QApplication.instance().focusChanged.connect(self.on_app_focus_changed)

    @staticmethod
    def _make_box(font: QFont, text: str) -> QLineEdit:
        box = QLineEdit(text)
        box.setFont(font)
        box.setPlaceholderText("00")
        box.setAlignment(Qt.AlignCenter)
        box.setFixedWidth(90)
        return box

    @staticmethod
    def _sync(box: QLineEdit, text: str) -> None:
        if box.text() != text:
            box.setText(text)

    def on_app_focus_changed(self, _old: Optional[QWidget], new: Optional[QWidget]) -> None:
        self.composer.state.is_focused = new in (self.hour_edit, self.minute_edit)
