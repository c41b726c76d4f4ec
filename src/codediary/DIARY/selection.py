# DIARY/selection.py
"""
Maps positions in a sorted entry list back to stable entry ids.

Positions depend on the sort order (timestamp, title, content) and change as
entries come and go, so a command fetches and sorts once, then resolves the
user's choice against that same list.
"""
from datetime import datetime
from typing import List, Optional, Sequence

from codediary.DIARY.errors import IndexOutOfRangeError
from codediary.DIARY.model import Entry
from codediary.DIARY.timestamps import Timestamp


def entry_at(position: int, sorted_entries: Sequence[Entry]) -> Entry:
    """Returns the entry at a zero-based position, or raises IndexOutOfRangeError."""
    if position < 0 or position >= len(sorted_entries):
        raise IndexOutOfRangeError(position, len(sorted_entries))
    return sorted_entries[position]


def resolve_position(position: int, sorted_entries: Sequence[Entry]) -> int:
    return entry_at(position, sorted_entries).id


def filter_by_range(entries: Sequence[Entry],
                    since: Optional[datetime] = None,
                    until: Optional[datetime] = None) -> List[Entry]:
    """Keeps entries whose timestamp lies within [since, until]. Either bound may be None."""
    lower = Timestamp.from_datetime(since) if since else None
    upper = Timestamp.from_datetime(until) if until else None
    return [
        entry for entry in entries
        if (lower is None or entry.timestamp >= lower)
        and (upper is None or entry.timestamp <= upper)
    ]
