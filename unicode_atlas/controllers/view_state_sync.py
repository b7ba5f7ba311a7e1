from __future__ import annotations

import logging
from typing import Callable, Optional

from PyQt6.QtCore import QObject, QTimer

from unicode_atlas.domain.character_record import CharacterRecord
from unicode_atlas.domain.enums import URL_DEBOUNCE_MS, QueryKey
from unicode_atlas.domain.errors import InvalidDeepLink
from unicode_atlas.domain.query_state import QueryState
from unicode_atlas.services.catalog_store import Catalog
from unicode_atlas.services.location_query import (
    LocationQuery,
    build_deep_link,
    decode_query_state,
    encode_query_state,
)

logger = logging.getLogger(__name__)


class ViewStateSynchronizer(QObject):
    """Mirror query state into the location query string and back.

    Responsibilities:
    - debounce QueryState changes into a single URL write (latest state wins)
    - resolve a `char` deep link once the catalog has finished loading
    - add/remove the `char` key as the detail view opens/closes

    The `char` key is left alone by query publishes so an open detail stays
    linkable while filters change.
    """

    def __init__(
        self,
        location: LocationQuery,
        *,
        debounce_ms: int = URL_DEBOUNCE_MS,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._location = location
        self._pending: QueryState | None = None
        self._deep_link_checked = False
        self._on_detail_requested: list[Callable[[CharacterRecord], None]] = []

        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.setInterval(max(0, int(debounce_ms)))
        self._timer.timeout.connect(self._publish_pending)

    def add_on_detail_requested(self, callback: Callable[[CharacterRecord], None] | None) -> None:
        if callback is None:
            return
        self._on_detail_requested.append(callback)

    # --- URL -> state ---

    def initial_query_state(self) -> QueryState:
        return decode_query_state(self._location.read())

    def deep_link_codepoint(self) -> str:
        return self._location.read().get(QueryKey.CHAR.value, "")

    def on_catalog_loaded(self, catalog: Catalog) -> CharacterRecord | None:
        """Resolve the `char` deep link against the first non-empty catalog.

        An empty catalog (failed or degraded load) leaves the check pending.
        """
        if self._deep_link_checked or catalog.is_empty:
            return None
        self._deep_link_checked = True

        codepoint = self.deep_link_codepoint()
        if not codepoint:
            return None
        record = catalog.get(codepoint)
        if record is None:
            logger.debug("%s", InvalidDeepLink(codepoint))
            return None

        logger.info("Opening deep-linked character %s", codepoint)
        for cb in list(self._on_detail_requested):
            try:
                cb(record)
            except Exception:
                logger.exception("Deep-link callback failed")
        return record

    # --- state -> URL ---

    @property
    def has_pending(self) -> bool:
        return self._pending is not None

    def schedule_publish(self, state: QueryState) -> None:
        """Restart the debounce window with `state` as the value to publish."""
        self._pending = state
        self._timer.start()

    def flush(self) -> None:
        """Publish a pending state now instead of waiting for the timer."""
        if self._timer.isActive():
            self._timer.stop()
        self._publish_pending()

    def _publish_pending(self) -> None:
        state = self._pending
        if state is None:
            return
        self._pending = None
        params = encode_query_state(state)
        char = self.deep_link_codepoint()
        if char:
            params[QueryKey.CHAR.value] = char
        self._location.replace(params)
        logger.debug("Published query state %s", params)

    def select_for_detail(self, codepoint: str) -> None:
        params = self._location.read()
        params[QueryKey.CHAR.value] = codepoint
        self._location.replace(params)

    def close_detail(self) -> None:
        params = self._location.read()
        if params.pop(QueryKey.CHAR.value, None) is not None:
            self._location.replace(params)

    @staticmethod
    def deep_link(origin: str, codepoint: str) -> str:
        return build_deep_link(origin, codepoint)
