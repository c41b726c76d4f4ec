# config.py
import os
from typing import Optional

DATABASE_FILE = os.path.expanduser("~/code_diary.db")
DATABASE_ENV_VAR = "CODE_DIARY_DB"

LOG_LEVEL_ENV_VAR = "CODE_DIARY_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"

LOG_FILE_ENV_VAR = "CODE_DIARY_LOG_FILE"
LOG_ROTATION = "1 MB"
LOG_RETENTION = "7 days"


def get_database_path(override: Optional[str] = None) -> str:
    """
    Picks the diary database file.
    An explicit path wins, then $CODE_DIARY_DB, then ~/code_diary.db.
    """
    path = override or os.environ.get(DATABASE_ENV_VAR) or DATABASE_FILE
    return os.path.expanduser(path)


def get_log_level(verbose: bool = False) -> str:
    if verbose:
        return "DEBUG"
    return os.environ.get(LOG_LEVEL_ENV_VAR, DEFAULT_LOG_LEVEL).upper()


def get_log_file(override: Optional[str] = None) -> Optional[str]:
    """Log file from --log-file or $CODE_DIARY_LOG_FILE; None keeps logs on stderr only."""
    path = override or os.environ.get(LOG_FILE_ENV_VAR)
    return os.path.expanduser(path) if path else None
