"""
Location Library
================
Defines the immutable Location record and the in-memory index used for lookup
and incremental search.

Classes:
    Location: A named place with an IANA timezone.
    LocationIndex: Static collection with canonical-text lookup and substring search.
"""
from __future__ import annotations

from dataclasses import dataclass, field
import json
import logging
import uuid
from typing import Any, Dict, Iterable, Iterator, List, Optional

from clockpair.config import DEFAULT_LOCATIONS_PATH, MAX_SUGGESTIONS
from clockpair.model.time_math import resolve_zone

logger = logging.getLogger(__name__)


def canonical_text(name: str, country: str) -> str:
    """The exact text that identifies a location inside a location field."""
    return f"{name}, {country}"


@dataclass(frozen=True)
class Location:
    name: str
    country: str
    timezone_identifier: str
    ascii_name: str = ""
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    name_lowercased: str = field(init=False)
    ascii_lowercased: str = field(init=False)

    def __post_init__(self) -> None:
        # Frozen dataclass: precomputed search keys go through object.__setattr__
        object.__setattr__(self, "name_lowercased", self.name.lower())
        object.__setattr__(self, "ascii_lowercased", (self.ascii_name or self.name).lower())

    @property
    def canonical_text(self) -> str:
        return canonical_text(self.name, self.country)

    def matches(self, query_lowercased: str) -> bool:
        return query_lowercased in self.name_lowercased or query_lowercased in self.ascii_lowercased

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> Optional[Location]:
        """
        Build a Location from a dataset record ``{city, city_ascii, country, timezone}``.
        Returns None for records without a resolvable timezone.
        """
        name = data.get("city") or data.get("city_ascii")
        country = data.get("country")
        tz_id = data.get("timezone")
        if not name or not country or not tz_id:
            return None
        if resolve_zone(tz_id) is None:
            return None
        return Location(
            name=name,
            country=country,
            timezone_identifier=tz_id,
            ascii_name=data.get("city_ascii") or "",
        )


class LocationIndex:
    """
    Immutable collection of locations, loaded once at startup.
    Dataset order is preserved and used as the search result order.
    """
    def __init__(self, locations: Iterable[Location]) -> None:
        self._locations: tuple[Location, ...] = tuple(locations)
        self._by_text: Dict[str, Location] = {}
        for loc in self._locations:
            # First occurrence wins for duplicate "<name>, <country>" entries
            self._by_text.setdefault(loc.canonical_text, loc)

    def __len__(self) -> int:
        return len(self._locations)

    def __iter__(self) -> Iterator[Location]:
        return iter(self._locations)

    def __getitem__(self, index: int) -> Location:
        return self._locations[index]

    def find(self, name: str, country: str) -> Optional[Location]:
        return self._by_text.get(canonical_text(name, country))

    def find_by_text(self, text: str) -> Optional[Location]:
        """Exact canonical-text lookup (no trimming, no case folding)."""
        return self._by_text.get(text)

    def contains_text(self, text: str) -> bool:
        return text in self._by_text

    def search(self, query: str, limit: int = MAX_SUGGESTIONS) -> List[Location]:
        """Case-insensitive substring search on the location name."""
        if not query or limit <= 0:
            return []
        needle = query.lower()
        results: List[Location] = []
        for loc in self._locations:
            if loc.matches(needle):
                results.append(loc)
                if len(results) >= limit:
                    break
        return results

    @classmethod
    def from_records(cls, records: Iterable[Dict[str, Any]]) -> LocationIndex:
        locations: List[Location] = []
        dropped = 0
        for record in records:
            loc = Location.from_dict(record)
            if loc is None:
                dropped += 1
                logger.debug(f"Dropping location record without usable timezone: {record!r}")
                continue
            locations.append(loc)
        if dropped:
            logger.info(f"Dropped {dropped} location records with unresolvable timezones.")
        return cls(locations)

    @classmethod
    def from_file(cls, filepath: str = DEFAULT_LOCATIONS_PATH) -> LocationIndex:
        logger.info(f"Loading locations from: {filepath}")
        try:
            with open(filepath, mode='r', encoding='utf-8') as f:
                records = json.load(f)
        except Exception as e:
            logger.exception(f"Failed to load location dataset: {e}")
            raise

        index = cls.from_records(records)
        logger.info(f"Loaded {len(index)} locations.")
        return index
