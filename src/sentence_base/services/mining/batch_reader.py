"""Batch Reader - read access to a user's committed mining batches."""

from typing import List

from sentence_base.core import MiningBatch, NotFoundError, SentenceEntry, User
from sentence_base.io import BatchRepository, DatabaseManager, SentenceRepository
from sentence_base.services.frequency_catalog import FrequencyCatalog


class BatchReader:
    def __init__(self, db: DatabaseManager, catalog: FrequencyCatalog) -> None:
        self._batches = BatchRepository(db)
        self._sentences = SentenceRepository(db)
        self._catalog = catalog

    def list_batches(self, user: User) -> List[MiningBatch]:
        """The user's batches, most recent first."""
        return self._batches.list_for_user(user.id)

    def get_batch(self, user: User, batch_id: int) -> MiningBatch:
        """
        Raises:
            NotFoundError: No batch with this id belongs to the user.
        """
        batch = self._batches.find_for_user(user.id, batch_id)
        if batch is None:
            raise NotFoundError("Batch Not Found")
        return batch

    def list_batch_sentences(self, user: User, batch: MiningBatch) -> List[SentenceEntry]:
        """Sentences of the batch with their word and corpus rank, by sentence id."""
        if batch.user_id != user.id:
            raise NotFoundError("Batch Not Found")
        return [
            SentenceEntry.from_rows(
                sentence, word, self._catalog.get_rank(word.dictionary_form, word.reading)
            )
            for sentence, word in self._sentences.list_for_batch(batch.id)
        ]
