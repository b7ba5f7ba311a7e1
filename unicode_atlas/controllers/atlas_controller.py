from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Optional

from unicode_atlas.controllers.font_coverage_sampler import FontCoverageSampler, SupportPredicate
from unicode_atlas.controllers.view_state_sync import ViewStateSynchronizer
from unicode_atlas.controllers.window_manager import Defer, WindowManager
from unicode_atlas.domain.character_record import CharacterRecord
from unicode_atlas.domain.enums import (
    BATCH_SIZE,
    LOAD_MORE_DELAY_MS,
    URL_DEBOUNCE_MS,
    Preferences,
    Theme,
)
from unicode_atlas.domain.query_state import QueryState
from unicode_atlas.services.app_config import AtlasConfig
from unicode_atlas.services.catalog_store import Catalog, CatalogStore
from unicode_atlas.services.idle_scheduler import IdleScheduler, QtIdleScheduler
from unicode_atlas.services.kv_store import PersistentKVStore, YamlKVStore
from unicode_atlas.services.location_query import LocationQuery
from unicode_atlas.services.preference_store import PreferenceStore
from unicode_atlas.services.query_engine import evaluate

logger = logging.getLogger(__name__)


class AtlasController:
    """Consumer-facing engine API.

    Owns the explicit pipeline run on every query change:
    re-evaluate -> reset window -> schedule one debounced URL publish.

    The presentation layer calls the mutators and reads the accessors; it
    never touches storage, the location or timers directly.
    """

    def __init__(
        self,
        *,
        kv: PersistentKVStore,
        location: LocationQuery,
        idle_scheduler: Optional[IdleScheduler] = None,
        support_predicate: Optional[SupportPredicate] = None,
        batch_size: int = BATCH_SIZE,
        load_more_delay_ms: int = LOAD_MORE_DELAY_MS,
        url_debounce_ms: int = URL_DEBOUNCE_MS,
        defer: Optional[Defer] = None,
    ) -> None:
        self._catalog_store = CatalogStore()
        self._prefs = PreferenceStore(kv)
        self._window = WindowManager(batch_size=batch_size, delay_ms=load_more_delay_ms, defer=defer)
        self._sync = ViewStateSynchronizer(location, debounce_ms=url_debounce_ms)
        self._sampler = FontCoverageSampler(
            idle_scheduler or QtIdleScheduler(),
            support_predicate=support_predicate,
        )

        self._results: tuple[CharacterRecord, ...] = ()
        self._selected: CharacterRecord | None = None
        self._detail_open = False
        self._on_detail_changed: list[Callable[[], None]] = []

        self._prefs.load()
        self._query = self._sync.initial_query_state()
        self._sync.add_on_detail_requested(self._open_detail)

    @classmethod
    def from_config(cls, config: AtlasConfig, *, location: LocationQuery, **kwargs: Any) -> "AtlasController":
        return cls(
            kv=YamlKVStore(config.settings_path),
            location=location,
            batch_size=config.batch_size,
            load_more_delay_ms=config.load_more_delay_ms,
            url_debounce_ms=config.url_debounce_ms,
            **kwargs,
        )

    # --- Callbacks ---

    def add_on_window_changed(self, callback: Callable[[], None] | None) -> None:
        self._window.add_on_window_changed(callback)

    def add_on_detail_changed(self, callback: Callable[[], None] | None) -> None:
        if callback is None:
            return
        self._on_detail_changed.append(callback)

    def add_on_unsupported_count_changed(self, callback: Callable[[int], None] | None) -> None:
        self._sampler.add_on_count_changed(callback)

    def _notify_detail_changed(self) -> None:
        for cb in list(self._on_detail_changed):
            try:
                cb()
            except Exception:
                logger.exception("Detail change callback failed")

    # --- Catalog ---

    def load_catalog(self, source: str | Path | list[Any]) -> Catalog:
        catalog = self._catalog_store.load(source)
        self._refresh()
        self._sync.on_catalog_loaded(catalog)
        self._sampler.start(catalog, self._prefs.font)
        return catalog

    @property
    def catalog(self) -> Catalog:
        return self._catalog_store.catalog

    @property
    def is_catalog_loaded(self) -> bool:
        return self._catalog_store.is_loaded

    @property
    def categories(self) -> tuple[str, ...]:
        return self.catalog.categories

    @property
    def blocks(self) -> tuple[str, ...]:
        return self.catalog.blocks

    # --- Query ---

    @property
    def query(self) -> QueryState:
        return self._query

    @property
    def results(self) -> tuple[CharacterRecord, ...]:
        return self._results

    def set_search_term(self, search_term: str) -> None:
        self._set_query(self._query.with_search_term(search_term))

    def set_category(self, category: str) -> None:
        self._set_query(self._query.with_category(category))

    def set_block(self, block: str) -> None:
        self._set_query(self._query.with_block(block))

    def clear_filters(self) -> None:
        self._set_query(QueryState())

    def _set_query(self, query: QueryState) -> None:
        if query == self._query:
            return
        self._query = query
        self._refresh()
        self._sync.schedule_publish(query)

    def _refresh(self) -> None:
        self._results = evaluate(self.catalog, self._query)
        self._window.reset(self._results)

    # --- Window ---

    @property
    def window(self) -> WindowManager:
        return self._window

    def request_more(self) -> bool:
        return self._window.request_more()

    # --- Preferences ---

    @property
    def preferences(self) -> Preferences:
        return self._prefs.preferences

    @property
    def favorites(self) -> frozenset[str]:
        return self._prefs.favorites

    def favorite_list(self) -> list[CharacterRecord]:
        return self._prefs.favorite_list(self.catalog)

    def is_favorite(self, codepoint: str) -> bool:
        return self._prefs.is_favorite(codepoint)

    def toggle_favorite(self, codepoint: str) -> bool:
        return self._prefs.toggle_favorite(codepoint)

    def set_theme(self, theme: Theme) -> None:
        self._prefs.set_theme(theme)

    def toggle_theme(self) -> Theme:
        return self._prefs.toggle_theme()

    def set_font(self, font: str) -> None:
        self._prefs.set_font(font)
        if self.is_catalog_loaded:
            self._sampler.start(self.catalog, self._prefs.font)

    @property
    def unsupported_count(self) -> int:
        return self._sampler.unsupported_count

    @property
    def coverage_scan_running(self) -> bool:
        return self._sampler.is_running

    # --- Detail / deep link ---

    @property
    def selected(self) -> CharacterRecord | None:
        return self._selected

    @property
    def detail_open(self) -> bool:
        return self._detail_open

    def select_for_detail(self, codepoint: str) -> bool:
        record = self.catalog.get(codepoint)
        if record is None:
            logger.debug("Ignoring detail request for unknown codepoint %s", codepoint)
            return False
        self._sync.select_for_detail(record.codepoint)
        self._open_detail(record)
        return True

    def close_detail(self) -> None:
        self._sync.close_detail()
        if not self._detail_open and self._selected is None:
            return
        self._detail_open = False
        self._selected = None
        self._notify_detail_changed()

    def _open_detail(self, record: CharacterRecord) -> None:
        self._selected = record
        self._detail_open = True
        self._notify_detail_changed()

    def deep_link_for_selected(self, origin: str) -> str | None:
        if self._selected is None:
            return None
        return self._sync.deep_link(origin, self._selected.codepoint)

    def flush_url(self) -> None:
        self._sync.flush()
