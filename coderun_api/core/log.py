"""Logging setup for the API process."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_HANDLER_NAME = "coderun_api"


def configure_logging(level: str = "INFO") -> None:
    """Attach a single stream handler to the root logger (idempotent)."""
    root = logging.getLogger()
    resolved = logging.getLevelName((level or "INFO").upper())
    root.setLevel(resolved if isinstance(resolved, int) else logging.INFO)
    if any(h.get_name() == _HANDLER_NAME for h in root.handlers):
        return
    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
