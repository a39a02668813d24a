"""Data access layer for mined sentences."""

import sqlite3
from typing import List, Optional, Sequence, Tuple

from sentence_base.core import Sentence, StoreError, Word
from sentence_base.io.database_manager import DatabaseManager
from sentence_base.io.word_repository import WORD_COLUMNS, row_to_word

SENTENCE_COLUMNS = """
    s.id AS sentence_id,
    s.user_id AS sentence_user_id,
    s.word_id AS sentence_word_id,
    s.sentence,
    s.is_pending,
    s.mining_batch_id,
    s.created_at AS sentence_created_at,
    s.updated_at AS sentence_updated_at
"""

SentenceRow = Tuple[Sentence, Word]


class SentenceRepository:
    """Reads and writes the ``sentences`` relation.

    Queries that feed the composite sentence view return (Sentence, Word)
    pairs joined in a single statement.
    """

    def __init__(self, db: DatabaseManager) -> None:
        if db is None:
            raise RuntimeError("Database manager required")
        self._db = db

    @property
    def connection(self) -> sqlite3.Connection:
        """Connection of the calling thread."""
        return self._db.connection

    def insert(self, user_id: int, word_id: int, text: str) -> Sentence:
        try:
            cur = self.connection.execute(
                """
                INSERT INTO sentences (user_id, word_id, sentence)
                VALUES (?, ?, ?)
                """,
                (user_id, word_id, text),
            )
        except sqlite3.Error as e:
            raise StoreError(f"Failed to add sentence: {e}") from e

        sentence = self.find_by_id(cur.lastrowid)
        if sentence is None:
            raise StoreError(f"Sentence {cur.lastrowid} vanished after insert")
        return sentence

    def find_by_id(self, sentence_id: int) -> Optional[Sentence]:
        try:
            row = self.connection.execute(
                f"""
                SELECT {SENTENCE_COLUMNS}
                FROM sentences s
                WHERE s.id = ?
                """,
                (sentence_id,),
            ).fetchone()
        except sqlite3.Error as e:
            raise StoreError(f"Failed to retrieve sentence: {e}") from e
        return row_to_sentence(row) if row else None

    def count_pending(self, user_id: int) -> int:
        try:
            row = self.connection.execute(
                """
                SELECT COUNT(*) FROM sentences
                WHERE user_id = ? AND is_pending = 1
                """,
                (user_id,),
            ).fetchone()
        except sqlite3.Error as e:
            raise StoreError(f"Failed to count pending sentences: {e}") from e
        return row[0]

    def list_pending(self, user_id: int) -> List[SentenceRow]:
        """All pending sentences of the user joined with their word, oldest first."""
        return self._select_joined(
            "s.user_id = ? AND s.is_pending = 1",
            (user_id,),
        )

    def list_pending_by_ids(self, user_id: int, sentence_ids: Sequence[int]) -> List[SentenceRow]:
        """Pending sentences of the user among ``sentence_ids``."""
        ids = list(sentence_ids)
        if not ids:
            return []
        placeholders = ", ".join("?" for _ in ids)
        return self._select_joined(
            f"s.user_id = ? AND s.is_pending = 1 AND s.id IN ({placeholders})",
            (user_id, *ids),
        )

    def list_for_batch(self, batch_id: int) -> List[SentenceRow]:
        return self._select_joined("s.mining_batch_id = ?", (batch_id,))

    def delete_pending(self, user_id: int, sentence_id: int) -> bool:
        """Delete a pending sentence owned by the user; False if there was none."""
        try:
            cur = self.connection.execute(
                """
                DELETE FROM sentences
                WHERE id = ? AND user_id = ? AND is_pending = 1
                """,
                (sentence_id, user_id),
            )
        except sqlite3.Error as e:
            raise StoreError(f"Failed to delete sentence: {e}") from e
        return cur.rowcount > 0

    def assign_to_batch(self, sentence_ids: Sequence[int], batch_id: int) -> int:
        """Move pending sentences into a batch; returns the number of rows moved."""
        ids = sorted(set(sentence_ids))
        if not ids:
            return 0
        placeholders = ", ".join("?" for _ in ids)
        try:
            cur = self.connection.execute(
                f"""
                UPDATE sentences
                SET is_pending = 0, mining_batch_id = ?
                WHERE is_pending = 1 AND id IN ({placeholders})
                """,
                (batch_id, *ids),
            )
        except sqlite3.Error as e:
            raise StoreError(f"Failed to assign sentences to batch: {e}") from e
        return cur.rowcount

    def _select_joined(self, where: str, params: tuple) -> List[SentenceRow]:
        try:
            rows = self.connection.execute(
                f"""
                SELECT {SENTENCE_COLUMNS}, {WORD_COLUMNS}
                FROM sentences s
                JOIN words w ON s.word_id = w.id
                WHERE {where}
                ORDER BY s.id ASC
                """,
                params,
            ).fetchall()
        except sqlite3.Error as e:
            raise StoreError(f"Failed to retrieve sentences: {e}") from e
        return [(row_to_sentence(row), row_to_word(row)) for row in rows]


def row_to_sentence(row: sqlite3.Row) -> Sentence:
    return Sentence(
        id=row["sentence_id"],
        user_id=row["sentence_user_id"],
        word_id=row["sentence_word_id"],
        text=row["sentence"],
        is_pending=bool(row["is_pending"]),
        mining_batch_id=row["mining_batch_id"],
        created_at=row["sentence_created_at"],
        updated_at=row["sentence_updated_at"],
    )
