from __future__ import annotations

import json
import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable
from urllib.error import URLError
from urllib.parse import urlparse
from urllib.request import Request, urlopen

from unicode_atlas.domain.character_record import CharacterRecord, parse_record
from unicode_atlas.domain.errors import LoadError

logger = logging.getLogger(__name__)

_FETCH_TIMEOUT_S = 30


@dataclass(frozen=True)
class Catalog:
    """Immutable record sequence plus derived lookup indices."""

    records: tuple[CharacterRecord, ...] = ()
    categories: tuple[str, ...] = ()
    blocks: tuple[str, ...] = ()
    by_codepoint: dict[str, CharacterRecord] = field(default_factory=dict, compare=False)
    by_category: dict[str, tuple[CharacterRecord, ...]] = field(default_factory=dict, compare=False)
    by_block: dict[str, tuple[CharacterRecord, ...]] = field(default_factory=dict, compare=False)

    def __len__(self) -> int:
        return len(self.records)

    @property
    def is_empty(self) -> bool:
        return not self.records

    def get(self, codepoint: str) -> CharacterRecord | None:
        return self.by_codepoint.get(codepoint)

    @classmethod
    def empty(cls) -> "Catalog":
        return cls()

    @classmethod
    def from_records(cls, records: Iterable[CharacterRecord]) -> "Catalog":
        ordered: list[CharacterRecord] = []
        by_codepoint: dict[str, CharacterRecord] = {}
        by_category: dict[str, list[CharacterRecord]] = {}
        by_block: dict[str, list[CharacterRecord]] = {}

        for rec in records:
            if rec.codepoint in by_codepoint:
                logger.warning("Duplicate codepoint %s in catalog; keeping first", rec.codepoint)
                continue
            ordered.append(rec)
            by_codepoint[rec.codepoint] = rec
            by_category.setdefault(rec.category_long, []).append(rec)
            by_block.setdefault(rec.unicode_block, []).append(rec)

        return cls(
            records=tuple(ordered),
            categories=tuple(sorted(by_category)),
            blocks=tuple(sorted(by_block)),
            by_codepoint=by_codepoint,
            by_category={k: tuple(v) for k, v in by_category.items()},
            by_block={k: tuple(v) for k, v in by_block.items()},
        )

    @classmethod
    def from_raw(cls, items: Any, *, source: object = "<decoded>") -> "Catalog":
        """Parse a decoded JSON array; entries without a codepoint are skipped."""
        if not isinstance(items, list):
            raise LoadError(source, "expected a JSON array, got {}".format(type(items).__name__))
        records = []
        for raw in items:
            rec = parse_record(raw)
            if rec is None:
                logger.debug("Skipping catalog entry without codepoint: %r", raw)
                continue
            records.append(rec)
        return cls.from_records(records)


def _is_url(source: str) -> bool:
    return urlparse(source).scheme in ("http", "https", "file")


def fetch_source(source: str | Path) -> Any:
    """Read and decode the JSON document at a path or URL."""
    text = str(source)
    try:
        if _is_url(text):
            req = Request(text, method="GET", headers={"Accept": "application/json"})
            with urlopen(req, timeout=_FETCH_TIMEOUT_S) as resp:
                raw = resp.read()
            return json.loads(raw.decode("utf-8"))
        return json.loads(Path(text).read_text(encoding="utf-8"))
    except (OSError, URLError, UnicodeError) as e:
        raise LoadError(source, str(e)) from e
    except ValueError as e:
        raise LoadError(source, "invalid JSON: {}".format(e)) from e


class CatalogStore:
    """Owns the loaded catalog.

    The catalog is swapped in whole: callers only ever see the previous
    catalog, the fully built new one, or the explicit empty catalog after a
    failure.
    """

    def __init__(self) -> None:
        self._catalog = Catalog.empty()
        self._loaded = False
        self._last_error: LoadError | None = None
        self._lock = threading.Lock()

    @property
    def catalog(self) -> Catalog:
        return self._catalog

    @property
    def is_loaded(self) -> bool:
        """True once a load attempt has completed, successfully or not."""
        return self._loaded

    @property
    def last_error(self) -> LoadError | None:
        return self._last_error

    def load(self, source: str | Path | list[Any]) -> Catalog:
        try:
            items = source if isinstance(source, list) else fetch_source(source)
            catalog = Catalog.from_raw(items, source=source if not isinstance(source, list) else "<list>")
            error = None
        except LoadError as e:
            logger.error("%s", e)
            catalog = Catalog.empty()
            error = e
        with self._lock:
            self._catalog = catalog
            self._last_error = error
            self._loaded = True
        if error is None:
            logger.info(
                "Loaded %d characters (%d categories, %d blocks)",
                len(catalog),
                len(catalog.categories),
                len(catalog.blocks),
            )
        return catalog
