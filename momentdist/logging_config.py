# momentdist/logging_config.py
"""
Logging setup for scripts and the API entry point.

The package only creates module loggers (logging.getLogger(__name__));
nothing is configured on import. Demos and api/main.py call setup_logging()
once at startup.
"""
import logging
import sys
from typing import Optional, Union

from .config import CONFIG

PACKAGE_LOGGER = "momentdist"

# Marks handlers added here so a second call replaces them and leaves others alone
_HANDLER_TAG = "_momentdist_handler"


def resolve_level(level: Union[int, str, None]) -> int:
    """
    Numeric logging level from an int, a name such as "debug", or None.

    None means CONFIG.log_level.

    Raises:
        ValueError: If the name is not a standard logging level
    """
    if level is None:
        level = CONFIG.log_level
    if isinstance(level, int):
        return level
    numeric = logging.getLevelName(str(level).upper())
    if not isinstance(numeric, int):
        raise ValueError(f"Unknown logging level: {level!r}")
    return numeric


def setup_logging(
    level: Union[int, str, None] = None,
    log_file: Optional[str] = None,
) -> logging.Logger:
    """
    Send 'momentdist' log records to stdout and, optionally, a file.

    Args:
        level: Logging level (int or name). Defaults to CONFIG.log_level.
        log_file: Optional path; the file is overwritten on each run.

    Returns:
        The package logger
    """
    numeric = resolve_level(level)
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(numeric)

    for handler in [h for h in logger.handlers if getattr(h, _HANDLER_TAG, False)]:
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(CONFIG.log_format, datefmt=CONFIG.log_datefmt)
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode='w', encoding='utf-8'))

    for handler in handlers:
        handler.setLevel(numeric)
        handler.setFormatter(formatter)
        setattr(handler, _HANDLER_TAG, True)
        logger.addHandler(handler)

    logger.debug("Logging at %s", logging.getLevelName(numeric))
    return logger
