"""Pending Queue - admission, priority listing and deletion of pending sentences."""

import logging
from typing import List

from sentence_base.core import (
    NotFoundError,
    PendingLimitReachedError,
    SentenceEntry,
    User,
    ValidationError,
)
from sentence_base.io import DatabaseManager, SentenceRepository
from sentence_base.services.frequency_catalog import FrequencyCatalog
from sentence_base.services.mining.word_ledger import WordLedger
from sentence_base.services.settings_manager import SettingsManager
from sentence_base.services.text_processing import normalize_field

logger = logging.getLogger(__name__)


class PendingQueue:
    """
    Application service for sentences awaiting a batch.

    Depends on DatabaseManager for persistence, WordLedger for word counts,
    FrequencyCatalog for corpus ranks and SettingsManager for the cap.
    """

    def __init__(
        self,
        db: DatabaseManager,
        ledger: WordLedger,
        catalog: FrequencyCatalog,
        settings: SettingsManager,
    ) -> None:
        self._db = db
        self._sentences = SentenceRepository(db)
        self._ledger = ledger
        self._catalog = catalog
        self._settings = settings

    def admit(self, user: User, dictionary_form: str, reading: str, text: str) -> SentenceEntry:
        """Queue a sentence for ``(dictionary_form, reading)``.

        Returns:
            The composite view of the new sentence and its word.

        Raises:
            ValidationError: A field is empty after trimming.
            PendingLimitReachedError: The user already has the maximum number
                of pending sentences.
        """
        dictionary_form = normalize_field(dictionary_form)
        reading = normalize_field(reading)
        text = normalize_field(text)
        reasons = [
            f"field \"{name}\" must be a non-empty string"
            for name, value in (
                ("dictionary_form", dictionary_form),
                ("reading", reading),
                ("sentence", text),
            )
            if not value
        ]
        if reasons:
            raise ValidationError(reasons)
        limit = self._settings.get_max_pending_sentences()

        with self._db.transaction():
            if self._sentences.count_pending(user.id) >= limit:
                raise PendingLimitReachedError()
            word = self._ledger.upsert_and_count(user, dictionary_form, reading)
            sentence = self._sentences.insert(user.id, word.id, text)

        return SentenceEntry.from_rows(
            sentence, word, self._catalog.get_rank(word.dictionary_form, word.reading)
        )

    def list_pending(self, user: User) -> List[SentenceEntry]:
        """Pending sentences in mining priority order.

        Sentences are bucketed by their word's mining frequency, buckets are
        emitted from the highest frequency down, and each bucket is sorted by
        corpus rank (most common words first). Ties keep submission order.
        """
        entries = [
            SentenceEntry.from_rows(
                sentence, word, self._catalog.get_rank(word.dictionary_form, word.reading)
            )
            for sentence, word in self._sentences.list_pending(user.id)
        ]
        return sorted(entries, key=lambda entry: (-entry.mining_frequency, entry.corpus_rank))

    def delete_pending(self, user: User, sentence_id: int) -> None:
        """Remove a pending sentence; the word's mining frequency is left as is.

        Raises:
            NotFoundError: No pending sentence with this id belongs to the user.
        """
        with self._db.transaction():
            deleted = self._sentences.delete_pending(user.id, sentence_id)
        if not deleted:
            raise NotFoundError("Pending Sentence Not Found")
