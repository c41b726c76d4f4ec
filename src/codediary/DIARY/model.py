# DIARY/model.py
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional

from codediary.DIARY.timestamps import Timestamp

UNTITLED = "Untitled"


@dataclass(frozen=True)
class Entry:
    id: int
    timestamp: Timestamp
    title: Optional[str]  # None means "no title"; "" is folded into None
    content: str

    def __post_init__(self):
        if self.title == "":
            object.__setattr__(self, "title", None)

    @classmethod
    def create_new(cls, title: Optional[str], content: str, next_id: Callable[[], int]) -> "Entry":
        """
        Builds a brand new entry stamped with the current time.
        `next_id` is asked for the id, usually DiaryStore.next_id.
        """
        return cls(id=next_id(), timestamp=Timestamp.now(), title=title, content=content)

    @classmethod
    def reconstruct(cls, id: int, timestamp: Timestamp, title: Optional[str], content: str) -> "Entry":
        return cls(id=id, timestamp=timestamp, title=title, content=content)

    @property
    def sort_key(self):
        return (self.timestamp, self.title or "", self.content)

    def __lt__(self, other: "Entry") -> bool:
        if not isinstance(other, Entry):
            return NotImplemented
        return self.sort_key < other.sort_key

    @property
    def display_title(self) -> str:
        return self.title if self.title else UNTITLED

    def summary(self) -> str:
        return f"{self.display_title} ({self.timestamp})"

    def detail(self) -> str:
        return f"{self.display_title} ({self.timestamp}):\n{self.content}"

    def __str__(self):
        return self.summary()

    def to_dict(self):
        return {
            "id": self.id,
            "timestamp": str(self.timestamp),
            "title": self.title,
            "content": self.content,
        }


def sort_entries(entries: Iterable[Entry]) -> List[Entry]:
    """Returns entries in display order: timestamp, then title, then content."""
    return sorted(entries, key=lambda entry: entry.sort_key)
