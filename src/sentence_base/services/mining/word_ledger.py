"""Word Ledger - per-user word list with mining frequency counting."""

import logging

from sentence_base.core import User, Word
from sentence_base.io import DatabaseManager, WordRepository

logger = logging.getLogger(__name__)


class WordLedger:
    """Counts how often a user has mined each (dictionary form, reading)."""

    def __init__(self, db: DatabaseManager) -> None:
        self._db = db
        self._words = WordRepository(db)

    def upsert_and_count(self, user: User, dictionary_form: str, reading: str) -> Word:
        """Create the word with frequency 1, or count one more encounter.

        Seeing a word again clears ``is_mined`` so it shows up for mining
        again even if it was already committed to a batch.
        """
        with self._db.transaction():
            word = self._words.upsert_and_count(user.id, dictionary_form, reading)
        logger.debug(
            "Word %s (%s) for user %d now at frequency %d",
            word.dictionary_form,
            word.reading,
            user.id,
            word.mining_frequency,
        )
        return word
