"""
Main Application Window
=======================
The primary GUI container: time entry, reference date, both city pickers and
the converted result.

Why is this file needed?
------------------------
1. Layout: It organizes the visual structure of the application.
2. Routing: It connects widget events (date picked, swap clicked) to the
   ConversionController and shows its results.
"""
from typing import Optional

from PySide6.QtCore import QDate, Qt
from PySide6.QtGui import QFont
from PySide6.QtWidgets import (
    QDateEdit, QGridLayout, QLabel, QMainWindow, QPushButton, QVBoxLayout, QWidget, QGroupBox, QFormLayout,
)

from clockpair.config import TIME_FIELD
from clockpair.controller.conversion import ConversionController
from clockpair.controller.time_input import TimeInputComposer
from clockpair.model.locations import Location
from clockpair.model.time_math import ConversionResult
from clockpair.view.widgets.city_picker import CityPicker
from clockpair.view.widgets.time_input import TimeInput

VISIBLE_APP_NAME = "Clockpair"


class MainWindow(QMainWindow):
    def __init__(self, controller: ConversionController) -> None:
        super().__init__()
        self.controller = controller
        self.setWindowTitle(VISIBLE_APP_NAME)
        self.resize(560, 360)

        main_widget = QWidget()
        self.setCentralWidget(main_widget)
        main_layout = QVBoxLayout(main_widget)

        # --- 1. INPUT TIME + DATE ---
        grp_input = QGroupBox("Time")
        form_input = QFormLayout(grp_input)

        self.composer = TimeInputComposer(controller.engine, TIME_FIELD, parent=self)
        self.time_input = TimeInput(self.composer)
        form_input.addRow("Time at first city:", self.time_input)

        self.date_edit = QDateEdit()
        self.date_edit.setCalendarPopup(True)
        self.date_edit.setDisplayFormat("dd MMM yyyy")
        ref = controller.reference_date
        self.date_edit.setDate(QDate(ref.year, ref.month, ref.day))
        self.date_edit.dateChanged.connect(self.on_date_changed)
        form_input.addRow("Date:", self.date_edit)

        main_layout.addWidget(grp_input)

        # --- 2. LOCATIONS ---
        grid = QGridLayout()
        self.pickers = {
            slot: CityPicker(controller.location_fields[slot], controller.searches[slot])
            for slot in (1, 2)
        }
        grid.addWidget(QLabel("From"), 0, 0)
        grid.addWidget(QLabel("To"), 0, 2)
        grid.addWidget(self.pickers[1], 1, 0, Qt.AlignTop)

        self.btn_swap = QPushButton("⇄")
        self.btn_swap.setToolTip("Swap locations")
        self.btn_swap.setFixedWidth(40)
        self.btn_swap.clicked.connect(controller.swap_locations)
        grid.addWidget(self.btn_swap, 1, 1, Qt.AlignTop)

        grid.addWidget(self.pickers[2], 1, 2, Qt.AlignTop)
        main_layout.addLayout(grid)

        # --- 3. RESULT ---
        result_font = QFont()
        result_font.setPointSize(36)
        result_font.setBold(True)

        self.lbl_result = QLabel()
        self.lbl_result.setFont(result_font)
        self.lbl_result.setAlignment(Qt.AlignCenter)
        main_layout.addWidget(self.lbl_result)

        self.lbl_result_date = QLabel()
        self.lbl_result_date.setAlignment(Qt.AlignCenter)
        self.lbl_result_date.setStyleSheet("color: gray;")
        main_layout.addWidget(self.lbl_result_date)

        main_layout.addStretch()

        controller.result_changed.connect(self.show_result)
        controller.selection_changed.connect(self.on_selection_changed)
        self.show_result(controller.result)
        self._update_title()

    # --- SLOTS ---

    def on_date_changed(self, qdate: QDate) -> None:
        self.controller.set_reference_date(qdate.toPython())

    def on_selection_changed(self, _slot: int, _location: Optional[Location]) -> None:
        self._update_title()

    def show_result(self, result: ConversionResult) -> None:
        self.lbl_result.setText(result.time)
        zone = getattr(result.timezone, "key", None) or result.instant.tzname() or ""
        self.lbl_result_date.setText(f"{result.instant.strftime('%a %d %b %Y')}  ({zone})")

    def _update_title(self) -> None:
        first = self.controller.selected_location(1)
        second = self.controller.selected_location(2)
        if first is None or second is None:
            self.setWindowTitle(VISIBLE_APP_NAME)
        else:
            self.setWindowTitle(f"{VISIBLE_APP_NAME}: {first.name} → {second.name}")
