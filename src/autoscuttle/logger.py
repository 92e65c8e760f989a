"""
Logging setup built on loguru.
"""

import sys
from typing import Optional

from loguru import logger as _logger

_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{extra[name]}</cyan> - <level>{message}</level>"
)


def setup_logging(level: str = "INFO", log_file: Optional[str] = None):
    """Replace loguru's default sink with ours, optionally adding a file sink."""
    _logger.remove()
    _logger.configure(extra={"name": "autoscuttle"})
    _logger.add(sys.stderr, level=level.upper(), format=_FORMAT)

    if log_file:
        _logger.add(
            log_file,
            level=level.upper(),
            format=_FORMAT,
            rotation="10 MB",
            retention=2,
        )


def get_logger(name: str):
    """Return a logger bound to the given module name."""
    return _logger.bind(name=name)
