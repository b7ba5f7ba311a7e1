from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Final


# Number of records revealed per window growth step.
BATCH_SIZE: Final[int] = 100

# Latency before a requested batch becomes visible.
LOAD_MORE_DELAY_MS: Final[int] = 300

# Quiet period before query state is mirrored into the URL.
URL_DEBOUNCE_MS: Final[int] = 300


class Theme(Enum):
    DARK = "dark"
    LIGHT = "light"

    @property
    def is_dark(self) -> bool:
        return self is Theme.DARK

    def toggled(self) -> "Theme":
        return Theme.LIGHT if self is Theme.DARK else Theme.DARK


class WindowStatus(Enum):
    NO_RESULTS = "no_results"
    LOADING = "loading"
    PARTIAL = "partial"
    COMPLETE = "complete"


class QueryKey(str, Enum):
    """Keys of the flat URL query representation."""

    SEARCH = "search"
    CATEGORY = "category"
    BLOCK = "block"
    CHAR = "char"


class PreferenceKey(str, Enum):
    """Storage keys owned by the preference store."""

    FAVORITES = "unicodeFavorites"
    DARK_MODE = "unicodeDarkMode"
    FONT = "unicodeFont"


@dataclass(frozen=True)
class FontChoice:
    name: str
    value: str


AVAILABLE_FONTS: Final[tuple[FontChoice, ...]] = (
    FontChoice("Inter", "'Inter', sans-serif"),
    FontChoice("Roboto", "'Roboto', sans-serif"),
    FontChoice("Roboto Mono", "'Roboto Mono', monospace"),
    FontChoice("Open Sans", "'Open Sans', sans-serif"),
    FontChoice("Lato", "'Lato', sans-serif"),
    FontChoice("Source Code Pro", "'Source Code Pro', monospace"),
    FontChoice("Fira Sans", "'Fira Sans', sans-serif"),
    FontChoice("Nunito", "'Nunito', sans-serif"),
)

DEFAULT_FONT: Final[str] = AVAILABLE_FONTS[0].value
DEFAULT_THEME: Final[Theme] = Theme.DARK


@dataclass(frozen=True)
class Preferences:
    theme: Theme = DEFAULT_THEME
    font: str = DEFAULT_FONT
