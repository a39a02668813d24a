"""Sentence mining entities used across services and persistence."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class User:
    """An authenticated learner.

    Attributes:
        id: Unique identifier in the database.
        username: Display name, unique case-sensitively.
        email: Lowercased unique address.
        secret_digest: Opaque password digest (never serialized).
        token_generation: Incremented to revoke every outstanding token.
    """

    id: int
    username: str
    email: str
    secret_digest: str
    token_generation: int
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    def to_dict(self) -> dict:
        return {"id": self.id, "username": self.username, "email": self.email}


@dataclass(frozen=True)
class Word:
    id: int
    user_id: int
    dictionary_form: str
    reading: str
    mining_frequency: int
    is_mined: bool
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


@dataclass(frozen=True)
class Sentence:
    id: int
    user_id: int
    word_id: int
    text: str
    is_pending: bool
    mining_batch_id: Optional[int] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


@dataclass(frozen=True)
class MiningBatch:
    id: int
    user_id: int
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


@dataclass(frozen=True)
class SentenceEntry:
    """Composite view of a sentence, its word and the word's corpus rank."""

    sentence_id: int
    sentence: str
    dictionary_form: str
    reading: str
    mining_frequency: int
    corpus_rank: int
    is_mined: bool

    @classmethod
    def from_rows(cls, sentence: Sentence, word: Word, corpus_rank: int) -> "SentenceEntry":
        return cls(
            sentence_id=sentence.id,
            sentence=sentence.text,
            dictionary_form=word.dictionary_form,
            reading=word.reading,
            mining_frequency=word.mining_frequency,
            corpus_rank=corpus_rank,
            is_mined=word.is_mined,
        )

    def to_dict(self) -> dict:
        return {
            "sentence_id": self.sentence_id,
            "sentence": self.sentence,
            "dictionary_form": self.dictionary_form,
            "reading": self.reading,
            "mining_frequency": self.mining_frequency,
            "frequency": self.corpus_rank,
            "is_mined": self.is_mined,
        }
