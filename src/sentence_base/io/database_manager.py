"""SQLite-backed store for users, words, sentences and mining batches."""

import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Union

from sentence_base.core import StoreError


class DatabaseManager:
    """Owns the SQLite connections, the schema and transaction boundaries.

    Each thread gets its own connection to the database file, opened on first
    use, so one manager can serve requests from a worker pool. Connections run
    in autocommit mode; every multi-statement write goes through
    ``transaction()`` so it is committed or rolled back as a unit.
    """

    def __init__(self, db_path: Union[str, Path]) -> None:
        """
        Raises:
            StoreError: If the database file cannot be opened.
        """
        self.db_path = Path(db_path)
        self._local = threading.local()
        self._lock = threading.Lock()
        self._connections: List[sqlite3.Connection] = []
        # Open the constructing thread's connection eagerly.
        self._get_connection()

    @property
    def connection(self) -> sqlite3.Connection:
        """Connection of the calling thread."""
        return self._get_connection()

    def _get_connection(self) -> sqlite3.Connection:
        connection = getattr(self._local, "connection", None)
        if connection is None:
            try:
                connection = sqlite3.connect(
                    self.db_path, isolation_level=None, timeout=30.0, check_same_thread=False
                )
                connection.row_factory = sqlite3.Row
                connection.execute("PRAGMA foreign_keys = ON;")
            except sqlite3.Error as e:
                raise StoreError(f"Failed to open database {self.db_path}: {e}") from e
            self._local.connection = connection
            self._local.transaction_depth = 0
            with self._lock:
                self._connections.append(connection)
        return connection

    def ensure_schema(self) -> None:
        """Create tables, indexes and triggers if they do not exist."""
        statements = [
            """
            CREATE TABLE IF NOT EXISTS users (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                username TEXT NOT NULL UNIQUE,
                email TEXT NOT NULL UNIQUE,
                secret_digest TEXT NOT NULL,
                token_generation INTEGER NOT NULL DEFAULT 0,
                created_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
                updated_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP
            );
            """,
            """
            CREATE TABLE IF NOT EXISTS words (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id INTEGER NOT NULL,
                dictionary_form TEXT NOT NULL CHECK (dictionary_form <> ''),
                reading TEXT NOT NULL CHECK (reading <> ''),
                mining_frequency INTEGER NOT NULL DEFAULT 1 CHECK (mining_frequency >= 0),
                is_mined INTEGER NOT NULL DEFAULT 0,
                created_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
                updated_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,

                FOREIGN KEY(user_id) REFERENCES users(id),
                UNIQUE(user_id, dictionary_form, reading)
            );
            """,
            """
            CREATE TABLE IF NOT EXISTS mining_batches (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id INTEGER NOT NULL,
                created_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
                updated_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,

                FOREIGN KEY(user_id) REFERENCES users(id)
            );
            """,
            """
            CREATE TABLE IF NOT EXISTS sentences (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id INTEGER NOT NULL,
                word_id INTEGER NOT NULL,
                sentence TEXT NOT NULL CHECK (sentence <> ''),
                is_pending INTEGER NOT NULL DEFAULT 1,
                created_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
                updated_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
                mining_batch_id INTEGER,

                FOREIGN KEY(user_id) REFERENCES users(id),
                FOREIGN KEY(word_id) REFERENCES words(id),
                FOREIGN KEY(mining_batch_id) REFERENCES mining_batches(id),
                CHECK ((is_pending = 1) = (mining_batch_id IS NULL))
            );
            """,
            """
            CREATE INDEX IF NOT EXISTS idx_sentences_user_pending
            ON sentences(user_id, is_pending);
            """,
            """
            CREATE INDEX IF NOT EXISTS idx_sentences_batch
            ON sentences(mining_batch_id);
            """,
            """
            CREATE INDEX IF NOT EXISTS idx_mining_batches_user
            ON mining_batches(user_id);
            """,
        ]
        for table in ("users", "words", "sentences", "mining_batches"):
            statements.append(
                f"""
                CREATE TRIGGER IF NOT EXISTS set_{table}_timestamps
                AFTER UPDATE ON {table}
                FOR EACH ROW WHEN NEW.updated_at = OLD.updated_at
                BEGIN
                    UPDATE {table} SET updated_at = CURRENT_TIMESTAMP WHERE id = NEW.id;
                END;
                """
            )
        # Batch membership is sealed at commit time.
        statements.append(
            """
            CREATE TRIGGER IF NOT EXISTS seal_committed_sentences
            BEFORE UPDATE OF is_pending, mining_batch_id ON sentences
            FOR EACH ROW WHEN OLD.mining_batch_id IS NOT NULL
            BEGIN
                SELECT RAISE(ABORT, 'committed sentences are immutable');
            END;
            """
        )
        statements.append(
            """
            CREATE TRIGGER IF NOT EXISTS keep_committed_sentences
            BEFORE DELETE ON sentences
            FOR EACH ROW WHEN OLD.is_pending = 0
            BEGIN
                SELECT RAISE(ABORT, 'committed sentences cannot be deleted');
            END;
            """
        )

        try:
            with self.transaction():
                for statement in statements:
                    self.connection.execute(statement)
        except sqlite3.Error as e:
            raise StoreError(f"Failed to create schema: {e}") from e

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """Run the enclosed statements as one atomic unit.

        ``BEGIN IMMEDIATE`` takes the write lock before the first read, so
        rows selected inside the block cannot be claimed by a concurrent
        writer. Nested blocks join the outermost transaction.
        """
        connection = self._get_connection()
        local = self._local
        local.transaction_depth += 1
        if local.transaction_depth == 1:
            try:
                connection.execute("BEGIN IMMEDIATE")
            except sqlite3.Error as e:
                local.transaction_depth -= 1
                raise StoreError(f"Failed to begin transaction: {e}") from e
        try:
            yield connection
        except BaseException:
            local.transaction_depth -= 1
            if local.transaction_depth == 0:
                connection.rollback()
            raise
        else:
            local.transaction_depth -= 1
            if local.transaction_depth == 0:
                try:
                    connection.commit()
                except sqlite3.Error as e:
                    connection.rollback()
                    raise StoreError(f"Failed to commit transaction: {e}") from e

    def close(self) -> None:
        """Close the connections of every thread."""
        with self._lock:
            connections, self._connections = self._connections, []
        for connection in connections:
            connection.close()
        self._local = threading.local()
