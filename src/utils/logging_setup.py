"""
Root logger setup driven by the resolved AppConfig.

Applies ENABLE_LOGGING and LOG_LEVEL once the startup cascade has finished.
Messages logged before this runs (e.g. the loader's fallback warnings) go
through Python's last-resort handler, which still prints WARNING and above.
"""

import logging
import sys

from src.config.settings import AppConfig


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Level names accepted in LOG_LEVEL besides the standard logging names.
_LEVEL_ALIASES = {
    "warn": "WARNING",
    "fatal": "CRITICAL",
    "trace": "DEBUG",
}


def parse_log_level(name: str) -> int:
    """
    Map a LOG_LEVEL string to a logging level number.

    Case-insensitive. Unknown names fall back to INFO.
    """
    key = (name or "").strip().lower()
    level_name = _LEVEL_ALIASES.get(key, key.upper())
    level = logging.getLevelName(level_name)
    if isinstance(level, int):
        return level
    return logging.INFO


def configure_logging(config: AppConfig) -> None:
    """
    Configure the root logger from `config`.

    Replaces any existing root handlers with a single stderr handler, so
    calling this more than once does not duplicate output. When
    enable_logging is False, the root level is raised above CRITICAL.
    """
    root_logger = logging.getLogger()

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    root_logger.addHandler(handler)

    if config.enable_logging:
        root_logger.setLevel(parse_log_level(config.log_level))
    else:
        root_logger.setLevel(logging.CRITICAL + 1)
