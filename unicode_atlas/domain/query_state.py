from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class QueryState:
    """Free text + category + block filter.

    An empty string means "no constraint"; fields are never None so that a
    missing URL key and an empty field are the same thing.
    """

    search_term: str = ""
    category: str = ""
    block: str = ""

    def __post_init__(self) -> None:
        for name in ("search_term", "category", "block"):
            if getattr(self, name) is None:
                object.__setattr__(self, name, "")

    @property
    def is_filtered(self) -> bool:
        return bool(self.search_term or self.category or self.block)

    def with_search_term(self, search_term: str) -> "QueryState":
        return replace(self, search_term=search_term or "")

    def with_category(self, category: str) -> "QueryState":
        return replace(self, category=category or "")

    def with_block(self, block: str) -> "QueryState":
        return replace(self, block=block or "")
