from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from unicode_atlas.domain.enums import BATCH_SIZE, LOAD_MORE_DELAY_MS, URL_DEBOUNCE_MS
from unicode_atlas.domain.errors import PersistenceReadError
from unicode_atlas.services.kv_store import YamlKVStore

logger = logging.getLogger(__name__)

_TRUTHY = ("1", "true", "yes", "on")


def _project_root() -> Path:
    return Path(__file__).resolve().parents[2]


def env_flag(env: Mapping[str, str], name: str) -> bool:
    return str(env.get(name, "")).strip().lower() in _TRUTHY


@dataclass(frozen=True)
class AtlasConfig:
    data_source: str
    settings_path: Path
    batch_size: int = BATCH_SIZE
    load_more_delay_ms: int = LOAD_MORE_DELAY_MS
    url_debounce_ms: int = URL_DEBOUNCE_MS
    debug: bool = False


def load_config(
    *,
    settings_path: str | Path | None = None,
    data_source: str | None = None,
    env: Mapping[str, str] | None = None,
) -> AtlasConfig:
    """Resolve configuration: explicit args, then env vars, then defaults.

    Tuning values (batch size, delays) come from an optional `atlas:` mapping
    in the settings YAML file; bad values fall back to the defaults.
    """
    env = os.environ if env is None else env
    root = _project_root()

    path = Path(settings_path or env.get("ATLAS_SETTINGS_PATH") or root / "settings.yaml")
    source = data_source or env.get("ATLAS_DATA_SOURCE") or str(root / "data" / "unicode-data.json")

    try:
        section = YamlKVStore(path).load().get("atlas") or {}
    except PersistenceReadError as e:
        logger.warning("%s; using default tuning", e)
        section = {}
    if not isinstance(section, dict):
        section = {}

    def _ival(key: str, default: int, minimum: int) -> int:
        v: Any = section.get(key, default)
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            return default
        return max(minimum, int(v))

    return AtlasConfig(
        data_source=source,
        settings_path=path,
        batch_size=_ival("batch_size", BATCH_SIZE, 1),
        load_more_delay_ms=_ival("load_more_delay_ms", LOAD_MORE_DELAY_MS, 0),
        url_debounce_ms=_ival("url_debounce_ms", URL_DEBOUNCE_MS, 0),
        debug=env_flag(env, "ATLAS_DEBUG"),
    )
