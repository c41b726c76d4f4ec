# DIARY/timestamps.py
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from codediary.DIARY.errors import MalformedTimestampError

MAX_YEAR = 65535
MAX_FIELD = 255

# Year is 3-5 digits so every year up to MAX_YEAR survives a round trip.
TIMESTAMP_PATTERN = re.compile(
    r"([0-9]{3,5})-([0-9]{1,2})-([0-9]{1,2}) ([0-9]{1,2}):([0-9]{1,2}):([0-9]{1,2})"
)


@dataclass(frozen=True, order=True)
class Timestamp:
    """
    A wall-clock moment with one-second resolution.

    Instances compare field by field (year, month, day, hour, minute, second).
    Only the integer ranges are checked: month 13 or day 99 are accepted, the
    same way the stored text form accepts them.
    """
    year: int
    month: int
    day: int
    hour: int
    minute: int
    second: int

    def __post_init__(self):
        if not 0 <= self.year <= MAX_YEAR:
            raise ValueError(f"year must be between 0 and {MAX_YEAR}, got {self.year}")
        for name in ("month", "day", "hour", "minute", "second"):
            value = getattr(self, name)
            if not 0 <= value <= MAX_FIELD:
                raise ValueError(f"{name} must be between 0 and {MAX_FIELD}, got {value}")

    @classmethod
    def now(cls) -> "Timestamp":
        """Captures the current local time, truncated to whole seconds."""
        return cls.from_datetime(datetime.now())

    @classmethod
    def from_datetime(cls, dt: datetime) -> "Timestamp":
        return cls(dt.year, dt.month, dt.day, dt.hour, dt.minute, dt.second)

    @classmethod
    def parse(cls, text: str) -> "Timestamp":
        """
        Parses 'YYYY-M-D H:M:S' into a Timestamp.
        Raises MalformedTimestampError if the text does not have that shape.
        """
        match = TIMESTAMP_PATTERN.fullmatch(text.strip())
        if not match:
            raise MalformedTimestampError(f"Not a timestamp: '{text}'")
        year, month, day, hour, minute, second = (int(part) for part in match.groups())
        if year > MAX_YEAR:
            raise MalformedTimestampError(f"Year out of range in timestamp: '{text}'")
        return cls(year, month, day, hour, minute, second)

    @classmethod
    def from_string(cls, text: str) -> Optional["Timestamp"]:
        """Like parse(), but returns None for malformed text."""
        try:
            return cls.parse(text)
        except MalformedTimestampError:
            return None

    def to_datetime(self) -> datetime:
        # Raises ValueError for values that are not on the calendar
        return datetime(self.year, self.month, self.day, self.hour, self.minute, self.second)

    def __str__(self):
        return format_timestamp(self)


def format_timestamp(timestamp: Timestamp) -> str:
    """Renders the canonical stored form, e.g. '2023-3-14 3:0:10'."""
    return (f"{timestamp.year:03d}-{timestamp.month}-{timestamp.day} "
            f"{timestamp.hour}:{timestamp.minute}:{timestamp.second}")
