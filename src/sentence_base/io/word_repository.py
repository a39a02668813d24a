"""Data access layer for the per-user word list."""

import sqlite3
from typing import Iterable, Optional

from sentence_base.core import StoreError, Word
from sentence_base.io.database_manager import DatabaseManager

WORD_COLUMNS = """
    w.id AS word_id,
    w.user_id AS word_user_id,
    w.dictionary_form,
    w.reading,
    w.mining_frequency,
    w.is_mined,
    w.created_at AS word_created_at,
    w.updated_at AS word_updated_at
"""


class WordRepository:
    """Reads and writes the ``words`` relation."""

    def __init__(self, db: DatabaseManager) -> None:
        if db is None:
            raise RuntimeError("Database manager required")
        self._db = db

    @property
    def connection(self) -> sqlite3.Connection:
        """Connection of the calling thread."""
        return self._db.connection

    def upsert_and_count(self, user_id: int, dictionary_form: str, reading: str) -> Word:
        """Insert the word or, if it exists, count one more encounter.

        The unique key on (user_id, dictionary_form, reading) serializes
        concurrent callers: the loser of an insert race updates the winner's
        row instead.
        """
        try:
            self.connection.execute(
                """
                INSERT INTO words (user_id, dictionary_form, reading)
                VALUES (?, ?, ?)
                ON CONFLICT(user_id, dictionary_form, reading) DO UPDATE SET
                    mining_frequency = mining_frequency + 1,
                    is_mined = 0
                """,
                (user_id, dictionary_form, reading),
            )
        except sqlite3.Error as e:
            raise StoreError(f"Failed to upsert word: {e}") from e

        word = self.find(user_id, dictionary_form, reading)
        if word is None:
            raise StoreError(f"Word {dictionary_form!r} vanished after upsert")
        return word

    def find(self, user_id: int, dictionary_form: str, reading: str) -> Optional[Word]:
        try:
            row = self.connection.execute(
                f"""
                SELECT {WORD_COLUMNS}
                FROM words w
                WHERE w.user_id = ? AND w.dictionary_form = ? AND w.reading = ?
                """,
                (user_id, dictionary_form, reading),
            ).fetchone()
        except sqlite3.Error as e:
            raise StoreError(f"Failed to retrieve word: {e}") from e
        return row_to_word(row) if row else None

    def mark_mined(self, word_ids: Iterable[int]) -> int:
        """Set ``is_mined`` on every given word; returns the number of rows touched."""
        ids = sorted(set(word_ids))
        if not ids:
            return 0
        placeholders = ", ".join("?" for _ in ids)
        try:
            cur = self.connection.execute(
                f"UPDATE words SET is_mined = 1 WHERE id IN ({placeholders})",
                ids,
            )
        except sqlite3.Error as e:
            raise StoreError(f"Failed to mark words as mined: {e}") from e
        return cur.rowcount


def row_to_word(row: sqlite3.Row) -> Word:
    """Convert a row selected with ``WORD_COLUMNS`` to a Word entity."""
    return Word(
        id=row["word_id"],
        user_id=row["word_user_id"],
        dictionary_form=row["dictionary_form"],
        reading=row["reading"],
        mining_frequency=row["mining_frequency"],
        is_mined=bool(row["is_mined"]),
        created_at=row["word_created_at"],
        updated_at=row["word_updated_at"],
    )
