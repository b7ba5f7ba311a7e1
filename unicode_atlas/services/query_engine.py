from __future__ import annotations

"""Query evaluation over a loaded catalog.

`evaluate()` is pure: the same catalog and query always give the same
ordered tuple. Results keep catalog order; there is no ranking.
"""

from typing import Callable, Iterable

from unicode_atlas.domain.character_record import CharacterRecord
from unicode_atlas.domain.query_state import QueryState
from unicode_atlas.services.catalog_store import Catalog

Predicate = Callable[[CharacterRecord], bool]


def text_predicate(search_term: str) -> Predicate:
    """Case-insensitive substring match against glyph, name, codepoint and alternative names."""
    needle = search_term.lower()

    def _match(rec: CharacterRecord) -> bool:
        return any(needle in field.lower() for field in rec.search_fields())

    return _match


def _candidates(catalog: Catalog, query: QueryState) -> Iterable[CharacterRecord]:
    # Index lists are stored in catalog order, so starting from the
    # narrower one keeps the output a subsequence of the catalog.
    pools: list[tuple[CharacterRecord, ...]] = []
    if query.category:
        pools.append(catalog.by_category.get(query.category, ()))
    if query.block:
        pools.append(catalog.by_block.get(query.block, ()))
    if not pools:
        return catalog.records
    return min(pools, key=len)


def evaluate(catalog: Catalog, query: QueryState) -> tuple[CharacterRecord, ...]:
    predicates: list[Predicate] = []
    if query.search_term:
        predicates.append(text_predicate(query.search_term))
    if query.category:
        predicates.append(lambda rec: rec.category_long == query.category)
    if query.block:
        predicates.append(lambda rec: rec.unicode_block == query.block)

    return tuple(rec for rec in _candidates(catalog, query) if all(p(rec) for p in predicates))
