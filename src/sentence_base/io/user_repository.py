"""Data access layer for users and their token generation."""

import sqlite3
from typing import Optional

from sentence_base.core import DuplicateUserError, StoreError, User
from sentence_base.io.database_manager import DatabaseManager


class UserRepository:
    """Reads and writes the ``users`` relation.

    Registration (hashing, validation) happens outside the core; this
    repository only stores an already-computed secret digest.
    """

    def __init__(self, db: DatabaseManager) -> None:
        if db is None:
            raise RuntimeError("Database manager required")
        self._db = db

    @property
    def connection(self) -> sqlite3.Connection:
        """Connection of the calling thread."""
        return self._db.connection

    def add_user(self, username: str, email: str, secret_digest: str) -> User:
        """Insert a user; email is stored lowercased.

        Raises:
            DuplicateUserError: If the username or email is already taken.
            StoreError: If the database write fails.
        """
        try:
            cur = self.connection.execute(
                """
                INSERT INTO users (username, email, secret_digest)
                VALUES (?, ?, ?)
                """,
                (username, email.lower(), secret_digest),
            )
        except sqlite3.IntegrityError as e:
            detail = str(e)
            if "users.username" in detail:
                raise DuplicateUserError("username") from e
            if "users.email" in detail:
                raise DuplicateUserError("email") from e
            raise StoreError(f"Failed to add user: {e}") from e
        except sqlite3.Error as e:
            raise StoreError(f"Failed to add user: {e}") from e

        user = self.find_by_id(cur.lastrowid)
        if user is None:
            raise StoreError(f"User {cur.lastrowid} vanished after insert")
        return user

    def find_by_id(self, user_id: int) -> Optional[User]:
        try:
            row = self.connection.execute(
                """
                SELECT id, username, email, secret_digest, token_generation,
                       created_at, updated_at
                FROM users
                WHERE id = ?
                """,
                (user_id,),
            ).fetchone()
        except sqlite3.Error as e:
            raise StoreError(f"Failed to retrieve user: {e}") from e
        return self._row_to_user(row) if row else None

    def increment_token_generation(self, user_id: int) -> User:
        """Bump the user's token generation, revoking every outstanding token."""
        try:
            cur = self.connection.execute(
                """
                UPDATE users
                SET token_generation = token_generation + 1
                WHERE id = ?
                """,
                (user_id,),
            )
        except sqlite3.Error as e:
            raise StoreError(f"Failed to update token generation: {e}") from e
        if cur.rowcount == 0:
            raise StoreError(f"User not found: {user_id}")

        user = self.find_by_id(user_id)
        if user is None:
            raise StoreError(f"User not found: {user_id}")
        return user

    @staticmethod
    def _row_to_user(row: sqlite3.Row) -> User:
        return User(
            id=row["id"],
            username=row["username"],
            email=row["email"],
            secret_digest=row["secret_digest"],
            token_generation=row["token_generation"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )
