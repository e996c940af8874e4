"""Logging setup shared by the API, services and integrations."""

from __future__ import annotations

import logging
import sys

from carenav.config import settings

_ROOT = "carenav"
_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def setup_logging(level: str | None = None) -> None:
    """Configure the ``carenav`` logger hierarchy once per process."""
    root = logging.getLogger(_ROOT)
    root.setLevel((level or settings.LOG_LEVEL).upper())

    if not any(getattr(h, "_carenav", False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(_FORMAT))
        handler._carenav = True  # type: ignore[attr-defined]
        root.addHandler(handler)

    # uvicorn installs its own handlers; keep its access log at our level
    logging.getLogger("uvicorn.access").setLevel(root.level)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(f"{_ROOT}.{name}")
