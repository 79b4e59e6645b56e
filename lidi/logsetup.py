"""Terminal logging configured from the LIDI_LOG environment variable."""

from __future__ import annotations

import logging
import os
import sys

ENV_VAR = "LIDI_LOG"
TRACE = 5
OFF = logging.CRITICAL + 10

logging.addLevelName(TRACE, "TRACE")

_LEVELS = {
    "off": OFF,
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
    "trace": TRACE,
}

_FORMAT = "%(asctime)s [%(levelname)-5s] (%(threadName)s) %(message)s"
_DATE_FORMAT = "%a, %d %b %Y %H:%M:%S %z"

_installed: list[logging.Handler] = []


class _BelowLevel(logging.Filter):
    def __init__(self, level: int) -> None:
        super().__init__()
        self._level = level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < self._level


def init_logger() -> int:
    """Send errors to stderr and everything else to stdout; return the level."""
    level = _LEVELS.get(os.environ.get(ENV_VAR, "").lower(), logging.INFO)
    formatter = logging.Formatter(_FORMAT, datefmt=_DATE_FORMAT)

    out_handler = logging.StreamHandler(sys.stdout)
    out_handler.addFilter(_BelowLevel(logging.ERROR))
    err_handler = logging.StreamHandler(sys.stderr)
    err_handler.setLevel(logging.ERROR)

    root = logging.getLogger()
    for handler in _installed:
        root.removeHandler(handler)
    _installed.clear()

    for handler in (out_handler, err_handler):
        handler.setFormatter(formatter)
        root.addHandler(handler)
        _installed.append(handler)

    root.setLevel(level)
    return level