from __future__ import annotations

"""Flat key-value URL query representation.

Only four keys are meaningful: search, category, block, char. A key is
written only when its value is non-empty, so an absent key and an empty
field decode to the same QueryState.
"""

from typing import Mapping, Protocol
from urllib.parse import parse_qsl, quote, urlencode

from unicode_atlas.domain.enums import QueryKey
from unicode_atlas.domain.query_state import QueryState

_QUERY_FIELDS: tuple[tuple[QueryKey, str], ...] = (
    (QueryKey.SEARCH, "search_term"),
    (QueryKey.CATEGORY, "category"),
    (QueryKey.BLOCK, "block"),
)


class LocationQuery(Protocol):
    def read(self) -> dict[str, str]: ...

    def replace(self, params: Mapping[str, str]) -> None: ...


def parse_query_string(query: str) -> dict[str, str]:
    """Decode `a=1&b=` into a dict; blank values are dropped, last key wins."""
    text = (query or "").lstrip("?")
    return {k: v for k, v in parse_qsl(text, keep_blank_values=True) if v}


def build_query_string(params: Mapping[str, str]) -> str:
    return urlencode([(k, v) for k, v in params.items() if v])


def encode_query_state(state: QueryState) -> dict[str, str]:
    out: dict[str, str] = {}
    for key, attr in _QUERY_FIELDS:
        value = getattr(state, attr)
        if value:
            out[key.value] = value
    return out


def decode_query_state(params: Mapping[str, str]) -> QueryState:
    return QueryState(
        search_term=params.get(QueryKey.SEARCH.value, "") or "",
        category=params.get(QueryKey.CATEGORY.value, "") or "",
        block=params.get(QueryKey.BLOCK.value, "") or "",
    )


def build_deep_link(origin: str, codepoint: str) -> str:
    return "{}/?{}={}".format(origin.rstrip("/"), QueryKey.CHAR.value, quote(codepoint, safe=""))


class MemoryLocationQuery:
    """Holds the canonical query string of the current location."""

    def __init__(self, query: str = "") -> None:
        self._query = build_query_string(parse_query_string(query))
        self.writes = 0

    @property
    def query_string(self) -> str:
        return self._query

    def read(self) -> dict[str, str]:
        return parse_query_string(self._query)

    def replace(self, params: Mapping[str, str]) -> None:
        self._query = build_query_string(params)
        self.writes += 1
