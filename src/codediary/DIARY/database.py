# DIARY/database.py
"""
SQLite persistence for diary entries.

One DiaryStore owns one connection for as long as the command runs. There is
no locking: two processes writing the same file at once is not supported.
"""
import sqlite3
from typing import List

from loguru import logger

from codediary.DIARY.errors import CorruptStoreError, StoreIOError
from codediary.DIARY.model import Entry
from codediary.DIARY.timestamps import Timestamp

CREATE_ENTRIES_TABLE = """
    CREATE TABLE IF NOT EXISTS entries (
        id INTEGER,
        timestamp TEXT,
        title TEXT,
        content TEXT
    )
"""


class DiaryStore:
    def __init__(self, path: str):
        self.path = path
        try:
            self.conn = sqlite3.connect(path)
        except sqlite3.Error as e:
            raise StoreIOError(f"Could not open diary database '{path}': {e}") from e
        self.conn.row_factory = sqlite3.Row
        logger.debug("Opened diary database at {}", path)
        try:
            self.create_tables()
        except StoreIOError:
            self.conn.close()
            raise

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def close(self):
        self.conn.close()

    def _execute(self, sql: str, params=()) -> sqlite3.Cursor:
        try:
            cursor = self.conn.execute(sql, params)
            self.conn.commit()
            return cursor
        except sqlite3.Error as e:
            raise StoreIOError(f"Database error: {e}") from e

    def create_tables(self):
        self._execute(CREATE_ENTRIES_TABLE)

    def next_id(self) -> int:
        """
        Returns one more than the highest stored id, or 1 for an empty diary.
        Computed from the rows themselves, so deleting a middle entry never
        shifts the ids that come after it. Deleting the newest entry frees its
        id, and the next insert gets it again.
        """
        row = self._execute("SELECT MAX(id) AS max_id FROM entries").fetchone()
        max_id = row["max_id"]
        return 1 if max_id is None else int(max_id) + 1

    def insert_entry(self, entry: Entry) -> Entry:
        self._execute(
            "INSERT INTO entries (id, timestamp, title, content) VALUES (?, ?, ?, ?)",
            (entry.id, str(entry.timestamp), entry.title or "", entry.content),
        )
        logger.debug("Inserted entry {}", entry.id)
        return entry

    def delete_entry(self, entry_id: int) -> int:
        """Deletes every row with this id. Deleting a missing id is not an error."""
        cursor = self._execute("DELETE FROM entries WHERE id = ?", (entry_id,))
        logger.debug("Deleted {} row(s) with id {}", cursor.rowcount, entry_id)
        return cursor.rowcount

    def get_all_entries(self) -> List[Entry]:
        """Retrieves every stored entry. The order is unspecified; sort before display."""
        rows = self._execute("SELECT id, timestamp, title, content FROM entries").fetchall()
        entries = [self._row_to_entry(row) for row in rows]
        logger.debug("Loaded {} entries", len(entries))
        return entries

    def count_entries(self) -> int:
        row = self._execute("SELECT COUNT(*) AS n FROM entries").fetchone()
        return row["n"]

    def reset(self):
        """Drops every entry. There is no undo."""
        self._execute("DROP TABLE IF EXISTS entries")
        self.create_tables()
        logger.debug("Reset diary database at {}", self.path)

    @staticmethod
    def _row_to_entry(row: sqlite3.Row) -> Entry:
        if row["id"] is None or row["timestamp"] is None or row["content"] is None:
            raise CorruptStoreError(f"Incomplete diary row: {tuple(row)}")
        timestamp = Timestamp.from_string(str(row["timestamp"]))
        if timestamp is None:
            raise CorruptStoreError(f"Unreadable timestamp '{row['timestamp']}' for entry {row['id']}")
        try:
            entry_id = int(row["id"])
        except (TypeError, ValueError) as e:
            raise CorruptStoreError(f"Unreadable id '{row['id']}'") from e
        # Stored "" means no title
        title = row["title"] or None
        return Entry.reconstruct(entry_id, timestamp, title, str(row["content"]))
