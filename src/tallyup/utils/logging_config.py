"""Logging configuration."""

import logging
import os
from typing import Optional

LOG_LEVEL_ENV_VAR = "TALLYUP_LOG_LEVEL"


def setup_logging(verbose: bool = False, level: Optional[str] = None) -> None:
    """Configure logging.

    Args:
        verbose: Log everything down to DEBUG
        level: Level name such as "INFO". Defaults to the TALLYUP_LOG_LEVEL
            environment variable, then WARNING.
    """
    if verbose:
        log_level = logging.DEBUG
    else:
        name = (level or os.environ.get(LOG_LEVEL_ENV_VAR) or "WARNING").upper()
        log_level = logging.getLevelName(name)
        if not isinstance(log_level, int):
            log_level = logging.WARNING

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logging.getLogger("tallyup").setLevel(log_level)
