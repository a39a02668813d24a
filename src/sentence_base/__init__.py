"""
Sentence Base - a sentence mining backend for Japanese learners.

This package provides:
- Morphological analysis with dictionary forms and readings
- Per-user word frequency tracking
- A prioritized queue of pending example sentences
- Immutable mining batches for flashcard export
- Stateless access / refresh tokens with revocation
"""

__version__ = "0.1.0"

# Make key components available at package level
from sentence_base.core import MiningBatch, Sentence, SentenceEntry, User, Word
from sentence_base.io import DatabaseManager

__all__ = [
    "User",
    "Word",
    "Sentence",
    "MiningBatch",
    "SentenceEntry",
    "DatabaseManager",
]
