"""
Logging setup for the panel_charts logger tree.

Every module logs under ``panel_charts.*``. Console records go to stderr,
because the CLI writes rendered charts (``<img>`` tags, SVG text) to stdout.
"""

import logging
import os
import sys
from typing import Optional


DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
SIMPLE_FORMAT = "%(levelname)s: %(message)s"

LOG_LEVEL_ENV_VAR = "PANEL_CHARTS_LOG_LEVEL"

_VERBOSITY_LEVELS = {1: logging.DEBUG, 0: logging.INFO, -1: logging.WARNING}


def setup_logging(
    verbosity: int = 0,
    log_file: Optional[str] = None,
    format_string: Optional[str] = None
) -> None:
    """
    (Re)configure the ``panel_charts`` logger.

    Calling it again replaces the previous handlers, so the CLI can raise or
    lower the level after the import-time default.

    Args:
        verbosity: 1 or more for DEBUG, 0 for INFO, -1 for WARNING, less for ERROR
        log_file: Also append the records to this file
        format_string: Console format (default: timestamped, or bare when quiet)

    The ``PANEL_CHARTS_LOG_LEVEL`` variable (DEBUG ... CRITICAL) overrides
    the level picked from ``verbosity``.

    Example:
        >>> setup_logging(verbosity=1, log_file="render.log")
    """
    level = _VERBOSITY_LEVELS.get(min(verbosity, 1), logging.ERROR)

    env_level = os.environ.get(LOG_LEVEL_ENV_VAR, "").upper()
    if env_level in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
        level = getattr(logging, env_level)

    if format_string is None:
        format_string = DEFAULT_FORMAT if verbosity >= 0 else SIMPLE_FORMAT

    # matplotlib's font manager is chatty at INFO
    logging.root.setLevel(logging.WARNING)

    logger = logging.getLogger("panel_charts")
    logger.setLevel(level)
    logger.propagate = False
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(format_string))
    logger.addHandler(console_handler)

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file, mode='a')
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(logging.Formatter(DEFAULT_FORMAT))
            logger.addHandler(file_handler)
            logger.info(f"Render log appended to: {log_file}")
        except OSError as e:
            logger.warning(f"Cannot open log file {log_file}: {e}")

    logger.debug(f"panel_charts log level: {logging.getLevelName(level)}")
