from __future__ import annotations

import json

import pytest
from conftest import SAMPLE_DATA, ManualDefer, ManualIdleScheduler, raw_records

from unicode_atlas.controllers.atlas_controller import AtlasController
from unicode_atlas.domain.enums import AVAILABLE_FONTS, PreferenceKey, Theme, WindowStatus
from unicode_atlas.domain.query_state import QueryState
from unicode_atlas.services.kv_store import MemoryKVStore
from unicode_atlas.services.location_query import MemoryLocationQuery


@pytest.fixture
def make_controller(qapp):
    def _make(query: str = "", *, kv: MemoryKVStore | None = None, **kwargs):
        location = MemoryLocationQuery(query)
        defer = ManualDefer()
        idle = ManualIdleScheduler(budget=50)
        controller = AtlasController(
            kv=kv or MemoryKVStore(),
            location=location,
            idle_scheduler=idle,
            defer=defer,
            url_debounce_ms=10_000,
            **kwargs,
        )
        return controller, location, defer, idle

    return _make


def test_load_reveals_first_batch_and_filter_menus(make_controller) -> None:
    controller, _loc, _defer, _idle = make_controller()
    assert not controller.is_catalog_loaded

    controller.load_catalog(str(SAMPLE_DATA))

    assert controller.is_catalog_loaded
    assert len(controller.window.revealed) == 12
    assert controller.window.status is WindowStatus.COMPLETE
    assert controller.categories[0] == "Letter, Lowercase"
    assert "Emoticons" in controller.blocks


def test_query_change_resets_window_and_debounces_url(make_controller) -> None:
    controller, loc, defer, _idle = make_controller(batch_size=100)
    controller.load_catalog(raw_records(250))
    controller.request_more()
    defer.run_all()
    assert len(controller.window.revealed) == 200

    controller.set_search_term("ideograph-4e0")
    assert len(controller.results) == 16
    assert len(controller.window.revealed) == 16
    assert loc.writes == 0

    controller.set_block("CJK Unified Ideographs")
    controller.flush_url()
    assert loc.read() == {"search": "ideograph-4e0", "block": "CJK Unified Ideographs"}
    assert loc.writes == 1


def test_unchanged_query_is_not_republished(make_controller) -> None:
    controller, loc, _defer, _idle = make_controller()
    controller.load_catalog(raw_records(3))
    controller.set_category("")
    controller.flush_url()
    assert loc.writes == 0


def test_clear_filters(make_controller) -> None:
    controller, loc, _defer, _idle = make_controller("search=arrow&block=Arrows")
    controller.load_catalog(str(SAMPLE_DATA))
    assert controller.query == QueryState(search_term="arrow", block="Arrows")
    assert [r.codepoint for r in controller.results] == ["U+2190", "U+2192"]

    controller.clear_filters()
    controller.flush_url()
    assert not controller.query.is_filtered
    assert len(controller.results) == 12
    assert loc.query_string == ""


def test_250_scenario_through_controller(make_controller) -> None:
    controller, _loc, defer, _idle = make_controller(batch_size=100)
    controller.load_catalog(raw_records(250))
    sizes = [len(controller.window.revealed)]
    for _ in range(3):
        controller.request_more()
        defer.run_all()
        sizes.append(len(controller.window.revealed))
    assert sizes == [100, 200, 250, 250]
    assert not controller.window.has_more()


def test_deep_link_opens_detail_after_load(make_controller) -> None:
    controller, _loc, _defer, _idle = make_controller("char=U%2B2605")
    events: list[bool] = []
    controller.add_on_detail_changed(lambda: events.append(controller.detail_open))
    assert controller.selected is None

    controller.load_catalog(str(SAMPLE_DATA))
    assert controller.detail_open
    assert controller.selected.codepoint == "U+2605"
    assert events == [True]


def test_unknown_deep_link_leaves_selection_empty(make_controller) -> None:
    controller, loc, _defer, _idle = make_controller("char=U%2BFFFFF")
    controller.load_catalog(str(SAMPLE_DATA))
    assert len(controller.catalog) == 12
    assert controller.selected is None
    assert not controller.detail_open


def test_deep_link_on_failed_load_makes_no_selection(make_controller, tmp_path) -> None:
    controller, _loc, _defer, _idle = make_controller("char=U%2B0041")
    controller.load_catalog(tmp_path / "missing.json")
    assert controller.catalog.is_empty
    assert controller.window.status is WindowStatus.NO_RESULTS
    assert controller.selected is None


def test_select_and_close_detail_update_url(make_controller) -> None:
    controller, loc, _defer, _idle = make_controller("search=a")
    controller.load_catalog(str(SAMPLE_DATA))

    assert controller.select_for_detail("U+00E9") is True
    assert loc.read() == {"search": "a", "char": "U+00E9"}
    assert controller.deep_link_for_selected("https://atlas.example") == "https://atlas.example/?char=U%2B00E9"

    controller.close_detail()
    assert not controller.detail_open
    assert controller.selected is None
    assert loc.read() == {"search": "a"}

    assert controller.select_for_detail("U+FFFFF") is False
    assert "char" not in loc.read()


def test_preferences_through_controller(make_controller) -> None:
    kv = MemoryKVStore({PreferenceKey.DARK_MODE.value: "false"})
    controller, _loc, _defer, idle = make_controller(kv=kv)
    controller.load_catalog(str(SAMPLE_DATA))
    assert controller.preferences.theme is Theme.LIGHT

    controller.toggle_favorite("U+1F600")
    controller.toggle_favorite("U+0021")
    assert [r.codepoint for r in controller.favorite_list()] == ["U+0021", "U+1F600"]
    assert json.loads(kv.get(PreferenceKey.FAVORITES.value)) == ["U+1F600", "U+0021"]

    controller.toggle_favorite("U+1F600")
    assert controller.favorites == {"U+0021"}

    controller.set_theme(Theme.DARK)
    assert kv.get(PreferenceKey.DARK_MODE.value) == "true"
    assert controller.toggle_theme() is Theme.LIGHT


def test_font_change_restarts_coverage_scan(make_controller) -> None:
    def _predicate(character: str, font: str) -> bool:
        return font != AVAILABLE_FONTS[3].value or character.isascii()

    controller, _loc, _defer, idle = make_controller(support_predicate=_predicate)
    counts: list[int] = []
    controller.add_on_unsupported_count_changed(counts.append)
    controller.load_catalog(str(SAMPLE_DATA))
    idle.run_all()
    assert controller.unsupported_count == 0

    controller.set_font(AVAILABLE_FONTS[3].value)
    assert controller.coverage_scan_running
    idle.run_all()
    assert not controller.coverage_scan_running
    assert controller.preferences.font == AVAILABLE_FONTS[3].value
    # Non-ASCII glyphs in the sample: U+00A0, U+00E9, U+03B1, arrows, star, 가, emoji.
    assert controller.unsupported_count == 8
    assert counts[-1] == 8


def test_deep_link_survives_failed_load_and_opens_on_retry(make_controller, tmp_path) -> None:
    controller, _loc, _defer, _idle = make_controller("char=U%2B0041")
    controller.load_catalog(tmp_path / "missing.json")
    assert controller.selected is None

    controller.load_catalog(str(SAMPLE_DATA))
    assert controller.selected is not None
    assert controller.selected.codepoint == "U+0041"
    assert controller.detail_open
