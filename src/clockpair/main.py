"""
Application Initialization
==========================
This module constructs the Model-View-Controller pieces and starts the Qt
event loop.

Why is this file needed?
------------------------
It acts as the "Dependency Injection" root. It:
1. Loads the static location dataset (once).
2. Instantiates the ValidationEngine and the ConversionController.
3. Passes the controller into the Main Window so they can communicate.
4. Prevents circular import errors by being the orchestrator.
"""
import logging
import os
import sys

from PySide6.QtCore import QCoreApplication, QSettings
from PySide6.QtWidgets import QApplication

from clockpair.controller.conversion import ConversionController
from clockpair.controller.validation import ValidationEngine
from clockpair.logging_config import setup_logging
from clockpair.model.locations import LocationIndex
from clockpair.model.selection_store import SelectionStore
from clockpair.view.main_window import MainWindow, VISIBLE_APP_NAME

ORG_ID = "clockpair"
APP_ID = "clockpair"

logger = logging.getLogger(__name__)


def create_app() -> QApplication:
    """Create and configure the QApplication instance."""
    os.environ.setdefault("QT_ENABLE_HIGHDPI_SCALING", "1")

    QCoreApplication.setOrganizationName(ORG_ID)
    QCoreApplication.setApplicationName(APP_ID)
    QSettings.setDefaultFormat(QSettings.Format.IniFormat)

    app = QApplication(sys.argv)
    app.setApplicationDisplayName(VISIBLE_APP_NAME)
    return app


def build_controller(index: LocationIndex) -> ConversionController:
    engine = ValidationEngine(location_index=index)
    return ConversionController(engine, index, store=SelectionStore())


def main() -> None:
    # 1. Setup Logging (level and file come from the environment)
    setup_logging()

    # 2. Create the Qt Application
    app = create_app()

    # 3. Initialize the Data Model
    index = LocationIndex.from_file()
    controller = build_controller(index)

    # 4. Initialize the Main Window, passing the controller
    window = MainWindow(controller)
    window.show()

    # 5. Start Event Loop
    logger.info("Entering event loop.")
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
