from __future__ import annotations

"""Catalog record type and the tolerant parser for raw JSON entries.

This module is *domain* logic (no Qt dependencies).

Raw records come from the catalog JSON with display-style keys
("Codepoint", "Unicode Block", ...). `parse_record()` maps them onto the
immutable `CharacterRecord` used everywhere else.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

# Placeholder the source data uses for "no named entity".
_EMPTY_NAMED_ENTITY = "&;"


@dataclass(frozen=True)
class CharacterRecord:
    codepoint: str
    character: str
    name: str
    category_long: str
    unicode_block: str
    alternative_names: tuple[str, ...] = ()
    category: str | None = None
    description: str | None = None
    wikipedia_link: str | None = None
    decimal_entity: str | None = None
    hex_entity: str | None = None
    named_entity: str | None = None

    @property
    def display_category(self) -> str:
        return self.category_long or (self.category or "")

    def search_fields(self) -> tuple[str, ...]:
        """Every string the free-text predicate looks at."""
        return (self.character, self.name, self.codepoint) + self.alternative_names


def normalize_alternative_names(value: Any) -> tuple[str, ...]:
    """Return alternative names as a tuple of strings.

    Accepts a native list or a JSON-serialized list string. Anything that
    cannot be interpreted as a list of names yields an empty tuple.
    """
    if value is None or value == "":
        return ()
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except ValueError:
            logger.debug("Unparsable alternative names: %r", value)
            return ()
    if not isinstance(value, (list, tuple)):
        return ()
    return tuple(str(v) for v in value if isinstance(v, (str, int, float)) and str(v))


def _str_field(raw: dict[str, Any], key: str) -> str:
    value = raw.get(key)
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    s = value if isinstance(value, str) else str(value)
    s = s.strip()
    return s if s else None


def parse_record(raw: Any) -> CharacterRecord | None:
    """Build a record from one raw catalog entry, or None if it has no identity."""
    if not isinstance(raw, dict):
        return None
    codepoint = _optional_str(raw.get("Codepoint"))
    if codepoint is None:
        return None

    named_entity = _optional_str(raw.get("Named Entity"))
    if named_entity == _EMPTY_NAMED_ENTITY:
        named_entity = None

    return CharacterRecord(
        codepoint=codepoint,
        character=_str_field(raw, "Character"),
        name=_str_field(raw, "Name"),
        category_long=_str_field(raw, "Category_long"),
        unicode_block=_str_field(raw, "Unicode Block"),
        alternative_names=normalize_alternative_names(raw.get("Alternative Names")),
        category=_optional_str(raw.get("Category")),
        description=_optional_str(raw.get("Character Description")),
        wikipedia_link=_optional_str(raw.get("Wikipedia Link")),
        decimal_entity=_optional_str(raw.get("Decimal Entity")),
        hex_entity=_optional_str(raw.get("Hex Entity")),
        named_entity=named_entity,
    )
