"""Logging setup shared by all simulator components."""

import logging
import sys
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logger(name: str, level: Optional[Union[str, int]] = None) -> logging.Logger:
    """Create (or fetch) a named logger with a single stream handler.

    Args:
        name: Logger name, usually the owning class name
        level: Logging level; when omitted the logger inherits from the
            ``procsim`` root logger (INFO by default)

    Returns:
        Configured logger
    """
    root = logging.getLogger("procsim")
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
        root.setLevel(logging.INFO)
        root.propagate = False

    if name == "procsim":
        logger = root
    else:
        logger = root.getChild(name)

    if level is not None:
        if isinstance(level, str):
            level = level.upper()
        logger.setLevel(level)

    return logger
