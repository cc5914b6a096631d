"""
Logging Configuration.

Every module obtains its logger through `get_logger(__name__)` so that all
output shares one format. The default level is read from the
HEXGRIDGEO_LOG_LEVEL environment variable (e.g. ``DEBUG``) and falls back
to WARNING, keeping the library quiet inside a larger service.
"""

import logging
import os
import sys
from typing import Optional, Union

LOG_LEVEL_ENV_VAR = "HEXGRIDGEO_LOG_LEVEL"
LOG_FORMAT = '%(asctime)s | %(name)s | %(levelname)s | %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def default_log_level() -> int:
    """Resolve the default level from the environment.

    Returns
    -------
    int
        Logging level; WARNING if the variable is unset or unrecognized.
    """
    name = os.environ.get(LOG_LEVEL_ENV_VAR, "WARNING").upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.WARNING


def get_logger(name: str, level: Optional[Union[int, str]] = None) -> logging.Logger:
    """Get a logger configured for the hexgridgeo library.

    Parameters
    ----------
    name : str
        Logger name (typically __name__).
    level : int or str, optional
        Logging level. Defaults to `default_log_level()`.

    Returns
    -------
    logging.Logger
        Configured logger instance.
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.setLevel(default_log_level() if level is None else level)
    return logger
