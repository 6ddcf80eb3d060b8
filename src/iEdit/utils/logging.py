"""Logging helpers for iEdit."""

from __future__ import annotations

import logging
from typing import Optional, Union

PACKAGE_LOGGER = "iEdit"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_ROOT: Optional[logging.Logger] = None


def _configure_root() -> logging.Logger:
    global _ROOT
    if _ROOT is None:
        _ROOT = logging.getLogger(PACKAGE_LOGGER)
        if not _ROOT.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter(LOG_FORMAT))
            _ROOT.addHandler(handler)
        _ROOT.setLevel(logging.INFO)
    return _ROOT


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return the package logger, or the child named *name* below it.

    The first call attaches a stream handler to the ``iEdit`` logger; module
    loggers created with :func:`logging.getLogger` propagate to it.
    """

    root = _configure_root()
    if not name or name == PACKAGE_LOGGER:
        return root
    if name.startswith(PACKAGE_LOGGER + "."):
        return logging.getLogger(name)
    return root.getChild(name)


def set_level(level: Union[int, str]) -> None:
    """Change the verbosity of every iEdit logger, e.g. ``set_level("DEBUG")``."""

    _configure_root().setLevel(level.upper() if isinstance(level, str) else level)
