"""Batch Committer - seals a selection of pending sentences into a mining batch."""

import logging
from typing import Iterable

from sentence_base.core import (
    InvalidSentencesProvidedError,
    MiningBatch,
    StoreError,
    User,
    ValidationError,
)
from sentence_base.io import BatchRepository, DatabaseManager, SentenceRepository, WordRepository

logger = logging.getLogger(__name__)


class BatchCommitter:
    """Creates immutable mining batches from pending sentences."""

    def __init__(self, db: DatabaseManager) -> None:
        self._db = db
        self._sentences = SentenceRepository(db)
        self._words = WordRepository(db)
        self._batches = BatchRepository(db)

    def commit(self, user: User, sentence_ids: Iterable[int]) -> MiningBatch:
        """
        Move the given pending sentences into a new batch in one transaction.

        Every id must name a distinct pending sentence owned by ``user``;
        otherwise nothing changes. The words of the committed sentences are
        marked as mined.

        Raises:
            ValidationError: ``sentence_ids`` is empty.
            InvalidSentencesProvidedError: An id is unknown, owned by another
                user, already committed, or repeated.
        """
        ids = list(sentence_ids)
        if not ids:
            raise ValidationError(["field \"sentences\" must not be empty"])

        with self._db.transaction():
            rows = self._sentences.list_pending_by_ids(user.id, ids)
            if len(rows) != len(ids):
                raise InvalidSentencesProvidedError()

            batch = self._batches.insert(user.id)
            moved = self._sentences.assign_to_batch([sentence.id for sentence, _ in rows], batch.id)
            if moved != len(rows):
                raise StoreError(f"Expected to commit {len(rows)} sentences, committed {moved}")
            self._words.mark_mined({word.id for _, word in rows})

        logger.info("User %d committed %d sentences into batch %d", user.id, len(rows), batch.id)
        return batch
