# logger.py
"""Process-wide log setup for the CLI, the dashboard and the library modules.

Modules call ``get_logger(__name__)``; the first call installs one stdout
handler on the root logger at ``LOG_LEVEL`` (see config.py).
"""

import logging
import sys
from typing import Optional

from config import LOG_LEVEL

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_handler: Optional[logging.Handler] = None


def setup_logging(level: str = LOG_LEVEL) -> logging.Handler:
    """Install the stdout handler once; later calls only adjust the level."""
    global _handler
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    if _handler is None:
        _handler = logging.StreamHandler(sys.stdout)
        _handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
        root.addHandler(_handler)
    return _handler


def get_logger(name: str) -> logging.Logger:
    if _handler is None:
        setup_logging()
    return logging.getLogger(name)
