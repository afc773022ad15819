"""Shared fixtures: a Qt core application, a small location index and settings."""

from __future__ import annotations

import os
from datetime import date
from pathlib import Path

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PySide6.QtCore import QCoreApplication, QEvent, QObject, QSettings
from PySide6.QtTest import QTest

from clockpair.controller.conversion import ConversionController
from clockpair.controller.validation import ValidationEngine
from clockpair.model.locations import LocationIndex
from clockpair.model.selection_store import SelectionStore

RECORDS = [
    {"city": "New York", "city_ascii": "New York", "country": "United States", "timezone": "America/New_York"},
    {"city": "London", "city_ascii": "London", "country": "United Kingdom", "timezone": "Europe/London"},
    {"city": "Tokyo", "city_ascii": "Tokyo", "country": "Japan", "timezone": "Asia/Tokyo"},
    {"city": "Paris", "city_ascii": "Paris", "country": "France", "timezone": "Europe/Paris"},
    {"city": "São Paulo", "city_ascii": "Sao Paulo", "country": "Brazil", "timezone": "America/Sao_Paulo"},
    {"city": "Nowhere", "city_ascii": "Nowhere", "country": "Atlantis", "timezone": "Mars/Olympus_Mons"},
    {"city": "Nozone", "city_ascii": "Nozone", "country": "Atlantis"},
] + [
    {"city": f"Santa Maria {i}", "city_ascii": f"Santa Maria {i}", "country": "Testland", "timezone": "UTC"}
    for i in range(12)
]

# Short timers keep the suite fast; waits below are several times longer
DEBOUNCE_MS = 20
SETTLE_MS = 120


def settle(ms: int = SETTLE_MS) -> None:
    """Let deferred handlers and debounce timers run."""
    QTest.qWait(ms)


@pytest.fixture(scope="session", autouse=True)
def qapp():
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


@pytest.fixture()
def index() -> LocationIndex:
    return LocationIndex.from_records(RECORDS)


@pytest.fixture()
def owner():
    """Per-test parent for every QObject a test builds; destroyed on teardown."""
    root = QObject()
    yield root
    # Run pending deferred handlers while their targets still exist
    QCoreApplication.processEvents()
    root.deleteLater()
    QCoreApplication.sendPostedEvents(None, QEvent.Type.DeferredDelete)


@pytest.fixture()
def engine(index, owner) -> ValidationEngine:
    return ValidationEngine(location_index=index, parent=owner)


@pytest.fixture()
def settings(tmp_path: Path) -> QSettings:
    return QSettings(str(tmp_path / "clockpair.ini"), QSettings.Format.IniFormat)


@pytest.fixture()
def store(settings) -> SelectionStore:
    return SelectionStore(settings)


@pytest.fixture()
def controller(engine, index, store, owner) -> ConversionController:
    return ConversionController(
        engine,
        index,
        store=store,
        reference_date=date(2024, 1, 15),
        initial_time="09:30",
        debounce_ms=DEBOUNCE_MS,
        search_debounce_ms=DEBOUNCE_MS,
        parent=owner,
    )
