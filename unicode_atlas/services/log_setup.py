from __future__ import annotations

import logging

_ROOT_LOGGER = "unicode_atlas"
_FORMAT = "[%(levelname)s] %(name)s: %(message)s"


def configure_logging(debug: bool = False) -> logging.Logger:
    """Attach one stream handler to the package logger (idempotent)."""
    logger = logging.getLogger(_ROOT_LOGGER)
    logger.setLevel(logging.DEBUG if debug else logging.INFO)
    if not any(getattr(h, "_atlas_handler", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_FORMAT))
        handler._atlas_handler = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    return logger
