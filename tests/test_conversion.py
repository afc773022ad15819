"""Tests for ConversionController: reactive recomputation, placeholders and swapping."""

from __future__ import annotations

from datetime import date

from clockpair.config import LOCATION1_FIELD, LOCATION2_FIELD, PLACEHOLDER_TIME, TIME_FIELD
from clockpair.controller.conversion import ConversionController

from conftest import settle


def _blur_with(engine, field_id: str, text: str) -> None:
    state = engine.field(field_id)
    state.is_focused = True
    state.current_value = text
    state.is_focused = False
    settle()


def test_initial_state(controller):
    assert controller.selected_location(1).canonical_text == "New York, United States"
    assert controller.selected_location(2).canonical_text == "London, United Kingdom"
    assert controller.location_fields[1].current_value == "New York, United States"
    assert controller.result.time == "14:30"
    assert controller.result.date == date(2024, 1, 15)


def test_committed_time_drives_result(controller, engine):
    _blur_with(engine, TIME_FIELD, "7:05")
    assert controller.result.time == "12:05"


def test_uncommitted_time_is_ignored(controller, engine):
    engine.field(TIME_FIELD).current_value = "11:00"
    settle()
    assert controller.result.time == "14:30"


def test_invalid_typed_time_reverts_and_keeps_result(controller, engine):
    _blur_with(engine, TIME_FIELD, "930")
    assert engine.field(TIME_FIELD).current_value == "09:30"
    assert controller.result.time == "14:30"


def test_reference_date_changes_offset(controller):
    controller.set_reference_date(date(2024, 3, 20))
    settle()
    assert controller.result.time == "13:30"
    controller.set_reference_date(date(2024, 7, 15))
    settle()
    assert controller.result.time == "14:30"
    assert controller.result.date == date(2024, 7, 15)


def test_result_crosses_day_boundary(controller, index, engine):
    controller.set_location(2, index.find("Tokyo", "Japan"))
    _blur_with(engine, TIME_FIELD, "22:00")
    assert controller.result.time == "12:00"
    assert controller.result.date == date(2024, 1, 16)


def test_missing_location_resets_to_placeholder(controller):
    controller.set_location(2, None)
    settle()
    result = controller.result
    assert result.time == PLACEHOLDER_TIME
    assert result.instant.date() == date(2024, 1, 15)
    assert result.instant.utcoffset() is not None


def test_invalid_committed_time_resets_to_placeholder(controller, engine):
    engine.set_field_value(TIME_FIELD, "bogus")
    settle()
    assert controller.result.time == PLACEHOLDER_TIME
    assert controller.result.instant.date() == date(2024, 1, 15)

    engine.set_field_value(TIME_FIELD, "10:00")
    settle()
    assert controller.result.time == "15:00"


def test_bursts_are_coalesced(controller, index):
    seen: list = []
    controller.result_changed.connect(seen.append)
    controller.set_location(2, index.find("Paris", "France"))
    controller.set_location(2, index.find("Tokyo", "Japan"))
    controller.set_reference_date(date(2024, 7, 1))
    assert controller.is_pending
    settle()
    assert len(seen) == 1
    assert seen[0].time == "22:30"


def test_typed_location_commit_updates_selection(controller, engine, store, index):
    _blur_with(engine, LOCATION2_FIELD, "Tokyo, Japan")
    assert controller.selected_location(2) is index.find("Tokyo", "Japan")
    assert controller.result.time == "23:30"
    assert store.load(index)[1].canonical_text == "Tokyo, Japan"


def test_typed_unknown_location_reverts(controller, engine):
    _blur_with(engine, LOCATION2_FIELD, "Atlantis")
    assert engine.field(LOCATION2_FIELD).current_value == "London, United Kingdom"
    assert controller.selected_location(2).name == "London"


def test_suggestion_selection_updates_slot(controller, engine, index):
    engine.field(LOCATION1_FIELD).current_value = "par"
    settle()
    search = controller.searches[1]
    assert [loc.name for loc in search.results] == ["Paris"]

    search.select(search.results[0])
    settle()
    assert controller.selected_location(1).name == "Paris"
    assert engine.field(LOCATION1_FIELD).last_valid == "Paris, France"
    assert controller.result.time == "08:30"
    # The field now holds the selection's text, so no dropdown reopens
    assert search.results == []


# ---- swap ----


def test_swap_exchanges_locations_and_fields(controller, engine):
    reverts: list = []
    engine.field_reverted.connect(lambda fid, value: reverts.append(fid))

    controller.swap_locations()
    assert controller.selected_location(1).name == "London"
    assert controller.selected_location(2).name == "New York"
    first, second = engine.field(LOCATION1_FIELD), engine.field(LOCATION2_FIELD)
    assert first.current_value == first.last_valid == "London, United Kingdom"
    assert second.current_value == second.last_valid == "New York, United States"
    assert not first.needs_validation and not second.needs_validation

    settle()
    assert controller.result.time == "04:30"
    assert reverts == []


def test_double_swap_is_identity(controller, engine):
    before = (
        controller.selected_location(1), controller.selected_location(2),
        engine.field(LOCATION1_FIELD).current_value, engine.field(LOCATION2_FIELD).current_value,
    )
    controller.swap_locations()
    controller.swap_locations()
    settle()
    after = (
        controller.selected_location(1), controller.selected_location(2),
        engine.field(LOCATION1_FIELD).current_value, engine.field(LOCATION2_FIELD).current_value,
    )
    assert after == before
    assert controller.result.time == "14:30"


def test_swap_with_pending_edit_blurs_cleanly(controller, engine):
    field = engine.field(LOCATION1_FIELD)
    field.is_focused = True
    field.current_value = "Lon"
    controller.swap_locations()
    field.is_focused = False
    settle()
    # The swapped-in pair was already judged; the blur has nothing to revert
    assert field.current_value == "London, United Kingdom"
    assert controller.selected_location(1).name == "London"

    # The unsaved "Lon" must not travel into the other field
    other = engine.field(LOCATION2_FIELD)
    assert other.current_value == other.last_valid == "New York, United States"
    other.is_focused = True
    other.is_focused = False
    settle()
    assert other.current_value == "New York, United States"
    assert controller.searches[2].results == []


def test_swap_is_persisted(controller, store, index):
    controller.swap_locations()
    first, second = store.load(index)
    assert first.name == "London"
    assert second.name == "New York"


def test_restores_persisted_selection(engine, index, store, owner):
    store.save(1, index.find("Tokyo", "Japan"))
    store.save(2, index.find("Paris", "France"))
    controller = ConversionController(
        engine, index, store=store, reference_date=date(2024, 1, 15), initial_time="09:30", parent=owner,
    )
    assert controller.location_fields[1].last_valid == "Tokyo, Japan"
    assert controller.result.time == "01:30"
