from __future__ import annotations

import json
import logging
from typing import Iterable

from unicode_atlas.domain.character_record import CharacterRecord
from unicode_atlas.domain.enums import DEFAULT_FONT, DEFAULT_THEME, PreferenceKey, Preferences, Theme
from unicode_atlas.domain.errors import PersistenceReadError, PersistenceWriteError
from unicode_atlas.services.catalog_store import Catalog
from unicode_atlas.services.kv_store import PersistentKVStore

logger = logging.getLogger(__name__)


class PreferenceStore:
    """Favorites, theme and font, persisted through a PersistentKVStore.

    Loaded once at startup; every mutation is written through immediately.
    This class is the only reader/writer of the underlying storage keys.
    """

    def __init__(self, kv: PersistentKVStore) -> None:
        self._kv = kv
        self._theme: Theme = DEFAULT_THEME
        self._font: str = DEFAULT_FONT
        # Insertion ordered; membership is what matters.
        self._favorites: list[str] = []

    # --- Loading ---

    def load(self) -> Preferences:
        self._theme = self._read_theme()
        self._font = self._read_font()
        self._favorites = self._read_favorites()
        logger.debug(
            "Preferences loaded: theme=%s font=%s favorites=%d",
            self._theme.value,
            self._font,
            len(self._favorites),
        )
        return self.preferences

    def _read_raw(self, key: PreferenceKey) -> str | None:
        try:
            return self._kv.get(key.value)
        except PersistenceReadError as e:
            logger.debug("%s; using default", e)
            return None

    def _read_theme(self) -> Theme:
        raw = self._read_raw(PreferenceKey.DARK_MODE)
        if raw is None:
            return DEFAULT_THEME
        try:
            dark = json.loads(raw)
        except ValueError:
            logger.debug("Malformed dark-mode value %r; using default", raw)
            return DEFAULT_THEME
        if not isinstance(dark, bool):
            return DEFAULT_THEME
        return Theme.DARK if dark else Theme.LIGHT

    def _read_font(self) -> str:
        raw = self._read_raw(PreferenceKey.FONT)
        # Stale values outside the enumerated list are kept on purpose.
        return raw if raw else DEFAULT_FONT

    def _read_favorites(self) -> list[str]:
        raw = self._read_raw(PreferenceKey.FAVORITES)
        if raw is None:
            return []
        try:
            data = json.loads(raw)
        except ValueError:
            logger.debug("Malformed favorites value %r; using default", raw)
            return []
        if not isinstance(data, list):
            return []
        out: list[str] = []
        for cp in data:
            if isinstance(cp, str) and cp not in out:
                out.append(cp)
        return out

    # --- Accessors ---

    @property
    def preferences(self) -> Preferences:
        return Preferences(theme=self._theme, font=self._font)

    @property
    def theme(self) -> Theme:
        return self._theme

    @property
    def font(self) -> str:
        return self._font

    @property
    def favorites(self) -> frozenset[str]:
        return frozenset(self._favorites)

    def is_favorite(self, codepoint: str) -> bool:
        return codepoint in self._favorites

    def favorite_list(self, catalog: Catalog | Iterable[CharacterRecord]) -> list[CharacterRecord]:
        records = catalog.records if isinstance(catalog, Catalog) else catalog
        favs = self.favorites
        return [rec for rec in records if rec.codepoint in favs]

    # --- Mutations (persist before returning) ---

    def toggle_favorite(self, codepoint: str) -> bool:
        """Flip membership; return True if the codepoint is now a favorite."""
        if codepoint in self._favorites:
            self._favorites = [cp for cp in self._favorites if cp != codepoint]
            now = False
        else:
            self._favorites = self._favorites + [codepoint]
            now = True
        self._write(PreferenceKey.FAVORITES, json.dumps(self._favorites))
        return now

    def set_theme(self, theme: Theme) -> None:
        self._theme = Theme(theme)
        self._write(PreferenceKey.DARK_MODE, json.dumps(self._theme.is_dark))

    def toggle_theme(self) -> Theme:
        self.set_theme(self._theme.toggled())
        return self._theme

    def set_font(self, font: str) -> None:
        self._font = str(font)
        self._write(PreferenceKey.FONT, self._font)

    def _write(self, key: PreferenceKey, value: str) -> None:
        try:
            self._kv.set(key.value, value)
        except PersistenceWriteError as e:
            # In-memory state stays authoritative until the next successful write.
            logger.warning("%s", e)
