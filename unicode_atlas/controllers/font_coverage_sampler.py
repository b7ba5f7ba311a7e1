from __future__ import annotations

import logging
from typing import Callable, Optional

from unicode_atlas.domain.character_record import CharacterRecord
from unicode_atlas.services.catalog_store import Catalog
from unicode_atlas.services.idle_scheduler import IdleDeadline, IdleScheduler

logger = logging.getLogger(__name__)

SupportPredicate = Callable[[str, str], bool]


def assume_supported(character: str, font: str) -> bool:
    """Default glyph test: trust every font.

    Real glyph coverage detection is a low-confidence heuristic; callers that
    have one plug it in through `support_predicate`.
    """
    return True


class FontCoverageSampler:
    """Count catalog glyphs a font cannot render, without blocking the loop.

    Each idle slice scans records until its deadline runs out (always at
    least one) and then publishes the running count. Changing the catalog or
    the font restarts the scan from zero; chunks belonging to an older scan
    are dropped via a generation token.
    """

    def __init__(
        self,
        scheduler: IdleScheduler,
        *,
        support_predicate: Optional[SupportPredicate] = None,
    ) -> None:
        self._scheduler = scheduler
        self._supported: SupportPredicate = support_predicate or assume_supported
        self._catalog: Catalog | None = None
        self._font: str | None = None
        self._gen = 0
        self._index = 0
        self._unsupported = 0
        self._running = False
        self._on_count: list[Callable[[int], None]] = []

    def add_on_count_changed(self, callback: Callable[[int], None] | None) -> None:
        if callback is None:
            return
        self._on_count.append(callback)

    @property
    def unsupported_count(self) -> int:
        return self._unsupported

    @property
    def scanned(self) -> int:
        return self._index

    @property
    def is_running(self) -> bool:
        return self._running

    def start(self, catalog: Catalog, font: str) -> None:
        """Scan `catalog` for `font`; no-op if that exact scan already ran or runs."""
        if catalog is self._catalog and font == self._font:
            return
        self._catalog = catalog
        self._font = font
        self._gen += 1
        self._index = 0
        self._unsupported = 0
        self._running = False
        if catalog.is_empty:
            self._publish()
            return
        self._running = True
        logger.debug("Font coverage scan started for %s (%d records)", font, len(catalog))
        token = self._gen
        self._scheduler.request_idle(lambda deadline: self._process_chunk(token, deadline))

    def cancel(self) -> None:
        self._gen += 1
        self._running = False
        # A cancelled scan is unfinished, so the next start must rerun it.
        self._catalog = None
        self._font = None

    def _process_chunk(self, token: int, deadline: IdleDeadline) -> None:
        if token != self._gen or self._catalog is None or self._font is None:
            return
        records: tuple[CharacterRecord, ...] = self._catalog.records
        font = self._font
        total = len(records)

        while self._index < total:
            if not self._supported(records[self._index].character, font):
                self._unsupported += 1
            self._index += 1
            if deadline.time_remaining() <= 0:
                break

        self._publish()

        if self._index < total:
            self._scheduler.request_idle(lambda d: self._process_chunk(token, d))
        else:
            self._running = False
            logger.debug("Font coverage scan finished: %d unsupported of %d", self._unsupported, total)

    def _publish(self) -> None:
        for cb in list(self._on_count):
            try:
                cb(self._unsupported)
            except Exception:
                logger.exception("Coverage count callback failed")
