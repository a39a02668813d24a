"""I/O layer - SQLite persistence for the mining store."""

from .batch_repository import BatchRepository
from .database_manager import DatabaseManager
from .sentence_repository import SentenceRepository
from .user_repository import UserRepository
from .word_repository import WordRepository

__all__ = [
    "DatabaseManager",
    "UserRepository",
    "WordRepository",
    "SentenceRepository",
    "BatchRepository",
]
