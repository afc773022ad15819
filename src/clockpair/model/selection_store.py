"""
Selection Persistence
=====================
Remembers the two selected locations between runs.

Stored in QSettings as ``location<slot>/name`` and ``location<slot>/country``.
Anything missing or no longer present in the dataset falls back to the
configured defaults, then to the first dataset entries.
"""
from __future__ import annotations

import logging
from typing import Optional, Sequence, Tuple

from PySide6.QtCore import QSettings

from clockpair.config import DEFAULT_LOCATIONS
from clockpair.model.locations import Location, LocationIndex

logger = logging.getLogger(__name__)


class SelectionStore:
    def __init__(
        self,
        settings: Optional[QSettings] = None,
        defaults: Sequence[Tuple[str, str]] = DEFAULT_LOCATIONS,
    ) -> None:
        self.settings = settings if settings is not None else QSettings()
        self.defaults = tuple(defaults)

    @staticmethod
    def _key(slot: int, part: str) -> str:
        return f"location{slot}/{part}"

    def _read(self, slot: int, index: LocationIndex) -> Optional[Location]:
        name = self.settings.value(self._key(slot, "name"), "", type=str)
        country = self.settings.value(self._key(slot, "country"), "", type=str)
        if not name or not country:
            return None
        location = index.find(name, country)
        if location is None:
            logger.warning(f"Persisted location '{name}, {country}' is not in the dataset.")
        return location

    def _fallback(self, slot: int, index: LocationIndex) -> Optional[Location]:
        if slot - 1 < len(self.defaults):
            name, country = self.defaults[slot - 1]
            location = index.find(name, country)
            if location is not None:
                return location
        if slot - 1 < len(index):
            return index[slot - 1]
        return index[0] if len(index) else None

    def load(self, index: LocationIndex) -> Tuple[Optional[Location], Optional[Location]]:
        first = self._read(1, index) or self._fallback(1, index)
        second = self._read(2, index) or self._fallback(2, index)
        logger.info(
            "Restored locations: "
            f"{first.canonical_text if first else None!r} / {second.canonical_text if second else None!r}"
        )
        return first, second

    def save(self, slot: int, location: Optional[Location]) -> None:
        if location is None:
            self.settings.remove(f"location{slot}")
        else:
            self.settings.setValue(self._key(slot, "name"), location.name)
            self.settings.setValue(self._key(slot, "country"), location.country)
        self.settings.sync()
