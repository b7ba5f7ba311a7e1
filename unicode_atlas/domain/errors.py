from __future__ import annotations


class AtlasError(Exception):
    """Base class for recoverable engine errors.

    None of these is fatal: each is caught by the component that raises it and
    mapped onto a degraded state (empty catalog, default preferences, no
    selection).
    """


class LoadError(AtlasError):
    """The catalog source could not be fetched or decoded."""

    def __init__(self, source: object, reason: str) -> None:
        super().__init__("Failed to load catalog from {!r}: {}".format(source, reason))
        self.source = source
        self.reason = reason


class PersistenceReadError(AtlasError):
    """A persisted value is missing or malformed."""

    def __init__(self, key: str, reason: str) -> None:
        super().__init__("Unreadable persisted value '{}': {}".format(key, reason))
        self.key = key


class PersistenceWriteError(AtlasError):
    """The underlying storage rejected a write."""

    def __init__(self, key: str, reason: str) -> None:
        super().__init__("Failed to persist '{}': {}".format(key, reason))
        self.key = key


class InvalidDeepLink(AtlasError):
    """A URL references a codepoint the catalog does not contain."""

    def __init__(self, codepoint: str) -> None:
        super().__init__("Unknown codepoint in deep link: {}".format(codepoint))
        self.codepoint = codepoint
