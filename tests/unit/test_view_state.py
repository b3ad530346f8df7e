"""
Unit tests for client view state and rendering.

Tests cover:
- Each action producing a new snapshot
- Previous snapshots never changing
- Holiday list formatting and order
- Theme persistence
"""

from dataclasses import FrozenInstanceError

import pytest

from requester.src.models import Country, Holiday
from requester.src.preferences import PreferenceStore
from requester.src.render import format_country, format_holiday, render_holidays, render_view
from requester.src.state import (
    CountriesLoaded,
    EditCountry,
    EditYear,
    HolidaysLoaded,
    RequestFailed,
    SubmitStarted,
    Theme,
    ThemeRestored,
    ToggleTheme,
    ViewState,
    reduce,
)

NEW_YEAR = Holiday(name="New Year", date="2023-01-01", type="National")
A = Holiday(name="A", date="2023-01-01", type="National")
B = Holiday(name="B", date="2023-02-01", type="Observance")
C = Holiday(name="C", date="2023-03-01", type="Religious")


class TestReduce:
    """reduce() returns new snapshots and leaves old ones alone."""

    def test_initial_state(self):
        state = ViewState()

        assert state.theme is Theme.LIGHT
        assert state.holidays == ()
        assert state.error == ""
        assert state.loading is False

    def test_toggle_theme_twice_round_trips(self):
        state = ViewState()

        dark = reduce(state, ToggleTheme())
        light = reduce(dark, ToggleTheme())

        assert dark.theme is Theme.DARK
        assert light.theme is Theme.LIGHT
        assert state.theme is Theme.LIGHT

    def test_theme_restored(self):
        assert reduce(ViewState(), ThemeRestored(Theme.DARK)).theme is Theme.DARK

    def test_edit_fields(self):
        state = reduce(reduce(ViewState(), EditCountry("US")), EditYear("2023"))

        assert (state.country, state.year) == ("US", "2023")

    def test_submit_sets_loading(self):
        state = reduce(ViewState(), SubmitStarted())

        assert state.loading is True

    def test_loaded_replaces_list_and_clears_error(self):
        failed = ViewState(error="boom", holidays=(A,), loading=True)

        state = reduce(failed, HolidaysLoaded((B, C)))

        assert state.holidays == (B, C)
        assert state.error == ""
        assert state.loading is False
        assert failed.holidays == (A,)
        assert failed.error == "boom"

    def test_failure_clears_list(self):
        loaded = ViewState(holidays=(A, B), loading=True)

        state = reduce(loaded, RequestFailed("Country and year are required"))

        assert state.holidays == ()
        assert state.error == "Country and year are required"
        assert state.loading is False
        assert loaded.holidays == (A, B)

    def test_countries_loaded(self):
        us = Country(code="US", name="United States")

        state = reduce(ViewState(), CountriesLoaded((us,)))

        assert state.countries == (us,)

    def test_snapshot_is_frozen(self):
        with pytest.raises(FrozenInstanceError):
            ViewState().error = "x"

    def test_unknown_action_rejected(self):
        with pytest.raises(TypeError):
            reduce(ViewState(), object())


class TestRendering:
    """Text output of the view."""

    def test_holiday_format(self):
        assert format_holiday(NEW_YEAR) == "New Year — 2023-01-01 (National)"

    def test_single_entry(self):
        state = reduce(ViewState(), HolidaysLoaded((NEW_YEAR,)))

        assert render_holidays(state) == ["New Year — 2023-01-01 (National)"]

    def test_order_is_preserved(self):
        state = reduce(ViewState(), HolidaysLoaded((C, A, B)))

        assert [line.split(" — ")[0] for line in render_holidays(state)] == ["C", "A", "B"]

    def test_error_rendered_verbatim(self):
        state = reduce(ViewState(), RequestFailed("API key is not configured"))

        rendered = render_view(state)

        assert "API key is not configured" in rendered.splitlines()

    def test_country_format(self):
        assert format_country(Country(code="US", name="United States")) == "United States (US)"


class TestPreferenceStore:
    """Theme persistence in a JSON file."""

    def test_missing_file_means_no_theme(self, tmp_path):
        assert PreferenceStore(tmp_path / "prefs.json").load_theme() is None

    def test_save_then_load(self, tmp_path):
        store = PreferenceStore(tmp_path / "nested" / "prefs.json")

        store.save_theme(Theme.DARK)

        assert PreferenceStore(tmp_path / "nested" / "prefs.json").load_theme() is Theme.DARK

    def test_corrupt_file_is_ignored(self, tmp_path):
        path = tmp_path / "prefs.json"
        path.write_text("{not json", encoding="utf-8")

        assert PreferenceStore(path).load_theme() is None

    def test_unknown_theme_is_ignored(self, tmp_path):
        path = tmp_path / "prefs.json"
        path.write_text('{"theme": "purple"}', encoding="utf-8")

        assert PreferenceStore(path).load_theme() is None
