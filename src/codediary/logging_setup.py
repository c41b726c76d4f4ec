# logging_setup.py
"""
Diagnostic logging for the diary, through loguru.

Anything meant for the user is printed with rich; the logger only carries
debug traces of what the store did.
"""
import sys
from typing import Optional

from loguru import logger

from codediary.config import DEFAULT_LOG_LEVEL, LOG_RETENTION, LOG_ROTATION

STDERR_FORMAT = "<level>{level: <7}</level> <dim>{name}</dim> {message}"
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} {level: <7} {name}:{function}:{line} {message}"


def setup_logging(level: str = DEFAULT_LOG_LEVEL, log_file: Optional[str] = None) -> None:
    """
    Replaces loguru's default sink with a stderr sink at `level`.
    When `log_file` is given, the same records also go to that file,
    rotated at LOG_ROTATION and pruned after LOG_RETENTION.
    """
    logger.remove()
    logger.add(sys.stderr, level=level, format=STDERR_FORMAT)
    if log_file:
        logger.add(log_file, level=level, format=FILE_FORMAT,
                   rotation=LOG_ROTATION, retention=LOG_RETENTION, encoding="utf-8")
