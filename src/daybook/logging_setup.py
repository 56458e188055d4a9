"""Logging for the ``daybook`` package.

Modules log through ``get_logger("daybook.<module>")`` and stay silent until
the CLI calls ``configure_logging``.
"""

import logging
import sys

LOG_LEVEL_ENV = "DAYBOOK_LOG_LEVEL"

_package_logger = logging.getLogger("daybook")
_package_logger.addHandler(logging.NullHandler())


def parse_level(level: str | None) -> int:
    """Map a level name or number to a logging level; WARNING when unset or unknown."""
    if not level:
        return logging.WARNING
    level = level.strip().upper()
    if level.isdigit():
        return int(level)
    numeric = logging.getLevelName(level)
    return numeric if isinstance(numeric, int) else logging.WARNING


def configure_logging(level: str | None = None) -> None:
    """Attach one stderr handler to the package logger; later calls only adjust the level."""
    resolved = parse_level(level)
    _package_logger.setLevel(resolved)
    if not any(isinstance(h, logging.StreamHandler) for h in _package_logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(asctime)s %(name)s %(levelname)s %(message)s"))
        _package_logger.addHandler(handler)
    _package_logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
