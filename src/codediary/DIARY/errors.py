# DIARY/errors.py
"""
Diary exception hierarchy.

Everything the diary core raises inherits from DiaryError, so the command
layer can catch one type and still tell the failure modes apart.
"""


class DiaryError(Exception):
    """Base exception class for all diary errors."""


class MalformedTimestampError(DiaryError, ValueError):
    """Raised when a timestamp string does not match 'Y-M-D H:M:S'."""


class StoreError(DiaryError):
    """Base class for persistence failures."""


class StoreIOError(StoreError):
    """Raised when the backing database cannot be opened, read or written."""


class CorruptStoreError(StoreError):
    """Raised when a stored row cannot be turned back into an Entry."""


class IndexOutOfRangeError(DiaryError, IndexError):
    """Raised when a list position does not point at an entry."""

    def __init__(self, position: int, length: int):
        self.position = position
        self.length = length
        super().__init__(f"Position {position} is out of range for {length} entries")


class EmptyDiaryError(DiaryError):
    """Raised when an operation needs at least one entry and there are none."""
