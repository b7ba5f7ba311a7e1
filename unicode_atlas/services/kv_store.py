from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Protocol

import yaml

from unicode_atlas.domain.errors import PersistenceReadError, PersistenceWriteError

logger = logging.getLogger(__name__)


class PersistentKVStore(Protocol):
    """Durable string key-value storage.

    `get` returns None for an absent key and may raise PersistenceReadError;
    `set` may raise PersistenceWriteError.
    """

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryKVStore:
    """In-process store, used for tests and headless runs."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def snapshot(self) -> dict[str, str]:
        return dict(self._data)


class YamlKVStore:
    """YAML-backed store.

    Responsibilities:
      - Load/save settings.yaml atomically (write to .tmp, then replace)
      - Keep keys it does not own untouched on every save

    Notes:
      - Values are stored as strings exactly as handed in; callers own the
        serialization of structured values.
    """

    def __init__(self, settings_path: str | Path | None = None) -> None:
        if settings_path is None:
            # <project_root>/settings.yaml
            project_root = Path(__file__).resolve().parents[2]
            self._path = project_root / "settings.yaml"
        else:
            self._path = Path(settings_path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> dict[str, Any]:
        p = self._path
        if not p.exists():
            return {}
        try:
            with p.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, UnicodeError, yaml.YAMLError) as e:
            raise PersistenceReadError(str(p), str(e)) from e
        return data if isinstance(data, dict) else {}

    def save(self, data: dict[str, Any]) -> None:
        p = self._path
        try:
            p.parent.mkdir(parents=True, exist_ok=True)
            tmp = p.with_suffix(p.suffix + ".tmp")
            with tmp.open("w", encoding="utf-8") as f:
                yaml.safe_dump(data or {}, f, allow_unicode=True, sort_keys=True)
            os.replace(str(tmp), str(p))
        except (OSError, yaml.YAMLError) as e:
            raise PersistenceWriteError(str(p), str(e)) from e

    def get(self, key: str) -> str | None:
        value = self.load().get(key)
        if value is None:
            return None
        if isinstance(value, str):
            return value
        # Hand-edited scalars and lists come back as YAML types; hand them on as JSON.
        return json.dumps(value)

    def set(self, key: str, value: str) -> None:
        try:
            data = self.load()
        except PersistenceReadError as e:
            logger.warning("Replacing unreadable settings file: %s", e)
            data = {}
        data[key] = value
        self.save(data)
