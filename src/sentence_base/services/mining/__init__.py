"""Mining services - word counts, pending queue and batches."""

from sentence_base.services.mining.batch_committer import BatchCommitter
from sentence_base.services.mining.batch_reader import BatchReader
from sentence_base.services.mining.pending_queue import PendingQueue
from sentence_base.services.mining.word_ledger import WordLedger

__all__ = [
    "WordLedger",
    "PendingQueue",
    "BatchCommitter",
    "BatchReader",
]
