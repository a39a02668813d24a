"""Data access layer for mining batches."""

import sqlite3
from typing import List, Optional

from sentence_base.core import MiningBatch, StoreError
from sentence_base.io.database_manager import DatabaseManager


class BatchRepository:
    """Reads and writes the ``mining_batches`` relation.

    Batches are append-only: there is no update or delete.
    """

    def __init__(self, db: DatabaseManager) -> None:
        if db is None:
            raise RuntimeError("Database manager required")
        self._db = db

    @property
    def connection(self) -> sqlite3.Connection:
        """Connection of the calling thread."""
        return self._db.connection

    def insert(self, user_id: int) -> MiningBatch:
        try:
            cur = self.connection.execute(
                "INSERT INTO mining_batches (user_id) VALUES (?)",
                (user_id,),
            )
            row = self.connection.execute(
                """
                SELECT id, user_id, created_at, updated_at
                FROM mining_batches
                WHERE id = ?
                """,
                (cur.lastrowid,),
            ).fetchone()
        except sqlite3.Error as e:
            raise StoreError(f"Failed to create mining batch: {e}") from e
        return self._row_to_batch(row)

    def find_for_user(self, user_id: int, batch_id: int) -> Optional[MiningBatch]:
        """The batch with ``batch_id`` if it belongs to the user, else None."""
        try:
            row = self.connection.execute(
                """
                SELECT id, user_id, created_at, updated_at
                FROM mining_batches
                WHERE id = ? AND user_id = ?
                """,
                (batch_id, user_id),
            ).fetchone()
        except sqlite3.Error as e:
            raise StoreError(f"Failed to retrieve mining batch: {e}") from e
        return self._row_to_batch(row) if row else None

    def list_for_user(self, user_id: int) -> List[MiningBatch]:
        """Batches owned by the user, most recently created first."""
        try:
            rows = self.connection.execute(
                """
                SELECT id, user_id, created_at, updated_at
                FROM mining_batches
                WHERE user_id = ?
                ORDER BY created_at DESC, id DESC
                """,
                (user_id,),
            ).fetchall()
        except sqlite3.Error as e:
            raise StoreError(f"Failed to retrieve mining batches: {e}") from e
        return [self._row_to_batch(row) for row in rows]

    @staticmethod
    def _row_to_batch(row: sqlite3.Row) -> MiningBatch:
        return MiningBatch(
            id=row["id"],
            user_id=row["user_id"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )
