from __future__ import annotations

import pytest

from unicode_atlas.controllers.view_state_sync import ViewStateSynchronizer
from unicode_atlas.domain.query_state import QueryState
from unicode_atlas.services.catalog_store import Catalog
from unicode_atlas.services.location_query import MemoryLocationQuery


@pytest.mark.qt
def test_burst_of_changes_publishes_latest_state_once(qtbot) -> None:
    loc = MemoryLocationQuery()
    sync = ViewStateSynchronizer(loc, debounce_ms=30)

    sync.schedule_publish(QueryState(search_term="c"))
    sync.schedule_publish(QueryState(search_term="ca"))
    sync.schedule_publish(QueryState(search_term="cat", block="Basic Latin"))
    assert loc.writes == 0

    qtbot.waitUntil(lambda: loc.writes == 1, timeout=1000)
    qtbot.wait(80)
    assert loc.writes == 1
    assert loc.read() == {"search": "cat", "block": "Basic Latin"}


def test_flush_publishes_immediately(qapp) -> None:
    loc = MemoryLocationQuery("search=old&category=Symbol%2C+Math")
    sync = ViewStateSynchronizer(loc, debounce_ms=10_000)
    sync.schedule_publish(QueryState(category="Letter"))
    assert sync.has_pending

    sync.flush()
    assert not sync.has_pending
    assert loc.query_string == "category=Letter"

    sync.flush()
    assert loc.writes == 1


def test_initial_query_state_comes_from_location(qapp) -> None:
    sync = ViewStateSynchronizer(MemoryLocationQuery("category=Letter&block="))
    assert sync.initial_query_state() == QueryState(search_term="", category="Letter", block="")


def test_deep_link_fires_once_after_load(qapp, sample_catalog: Catalog) -> None:
    opened: list[str] = []
    sync = ViewStateSynchronizer(MemoryLocationQuery("char=U%2B0041"))
    sync.add_on_detail_requested(lambda rec: opened.append(rec.codepoint))

    assert sync.on_catalog_loaded(sample_catalog).codepoint == "U+0041"
    assert sync.on_catalog_loaded(sample_catalog) is None
    assert opened == ["U+0041"]


def test_empty_catalog_leaves_deep_link_pending(qapp, sample_catalog: Catalog) -> None:
    sync = ViewStateSynchronizer(MemoryLocationQuery("char=U%2B0041"))

    assert sync.on_catalog_loaded(Catalog.empty()) is None
    assert sync.on_catalog_loaded(sample_catalog).codepoint == "U+0041"


def test_unknown_deep_link_is_ignored(qapp, sample_catalog: Catalog) -> None:
    opened: list[str] = []
    sync = ViewStateSynchronizer(MemoryLocationQuery("char=U%2BFFFFF"))
    sync.add_on_detail_requested(lambda rec: opened.append(rec.codepoint))

    assert sync.on_catalog_loaded(sample_catalog) is None
    assert opened == []


def test_publish_keeps_open_detail_and_close_removes_it(qapp) -> None:
    loc = MemoryLocationQuery()
    sync = ViewStateSynchronizer(loc, debounce_ms=10_000)

    sync.select_for_detail("U+2605")
    sync.schedule_publish(QueryState(search_term="star"))
    sync.flush()
    assert loc.read() == {"search": "star", "char": "U+2605"}

    sync.close_detail()
    assert loc.read() == {"search": "star"}
    assert "char" not in loc.query_string


def test_close_without_char_does_not_write(qapp) -> None:
    loc = MemoryLocationQuery("search=x")
    sync = ViewStateSynchronizer(loc)
    sync.close_detail()
    assert loc.writes == 0
