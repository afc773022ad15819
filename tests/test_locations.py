"""Tests for the Location record and LocationIndex."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from clockpair.config import DEFAULT_LOCATIONS_PATH
from clockpair.model.locations import Location, LocationIndex


def test_records_without_resolvable_timezone_are_dropped(index):
    names = [loc.name for loc in index]
    assert "Nowhere" not in names
    assert "Nozone" not in names
    assert names[:5] == ["New York", "London", "Tokyo", "Paris", "São Paulo"]


def test_record_with_non_string_timezone_is_dropped():
    index = LocationIndex.from_records([
        {"city": "Oslo", "country": "Norway", "timezone": 42},
        {"city": "Lima", "country": "Peru", "timezone": ["America/Lima"]},
        {"city": "Cairo", "country": "Egypt", "timezone": "Africa/Cairo"},
    ])
    assert [loc.name for loc in index] == ["Cairo"]


def test_location_precomputes_search_keys():
    loc = Location(name="São Paulo", country="Brazil", timezone_identifier="America/Sao_Paulo", ascii_name="Sao Paulo")
    assert loc.name_lowercased == "são paulo"
    assert loc.ascii_lowercased == "sao paulo"
    assert loc.canonical_text == "São Paulo, Brazil"


def test_location_ids_are_unique():
    a = Location(name="Paris", country="France", timezone_identifier="Europe/Paris")
    b = Location(name="Paris", country="France", timezone_identifier="Europe/Paris")
    assert a.id != b.id
    assert a != b


def test_location_is_immutable():
    loc = Location(name="Paris", country="France", timezone_identifier="Europe/Paris")
    with pytest.raises(AttributeError):
        loc.name = "Lyon"


def test_find_by_canonical_text(index):
    assert index.find("Tokyo", "Japan").timezone_identifier == "Asia/Tokyo"
    assert index.find_by_text("Paris, France").name == "Paris"
    assert index.find_by_text("paris, france") is None
    assert index.find_by_text("Paris") is None
    assert index.contains_text("London, United Kingdom")
    assert not index.contains_text("")


# ---- search ----


def test_search_is_case_insensitive_substring(index):
    assert [loc.name for loc in index.search("LON")] == ["London"]
    assert [loc.name for loc in index.search("o")][:3] == ["New York", "London", "Tokyo"]


def test_search_matches_ascii_name(index):
    assert [loc.name for loc in index.search("sao")] == ["São Paulo"]


def test_search_is_capped(index):
    assert len(index.search("santa")) == 10
    assert len(index.search("santa", limit=3)) == 3


def test_search_empty_query(index):
    assert index.search("") == []


# ---- loading ----


def test_from_file(tmp_path: Path):
    path = tmp_path / "locations.json"
    path.write_text(json.dumps([
        {"city": "Oslo", "city_ascii": "Oslo", "country": "Norway", "timezone": "Europe/Oslo"},
        {"city": "Nowhere", "country": "Atlantis", "timezone": ""},
    ]), encoding="utf-8")
    index = LocationIndex.from_file(str(path))
    assert len(index) == 1
    assert index[0].canonical_text == "Oslo, Norway"


def test_from_file_missing_raises(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        LocationIndex.from_file(str(tmp_path / "missing.json"))


def test_bundled_dataset_loads():
    index = LocationIndex.from_file(DEFAULT_LOCATIONS_PATH)
    assert index.find("New York", "United States") is not None
    assert index.find("London", "United Kingdom") is not None
    assert all(loc.timezone_identifier for loc in index)
