"""Domain layer - Pure entities and the error taxonomy."""

from .errors import (
    ConfigurationError,
    DuplicateUserError,
    ExpiredTokenError,
    IatInTheFutureError,
    InvalidSentencesProvidedError,
    InvalidSubjectError,
    InvalidTokenTypeError,
    MalformedTokenError,
    NoTokenError,
    NotFoundError,
    PendingLimitReachedError,
    RevokedTokenError,
    SentenceBaseError,
    StoreError,
    TokenError,
    ValidationError,
)
from .mining_entities import MiningBatch, Sentence, SentenceEntry, User, Word

__all__ = [
    "User",
    "Word",
    "Sentence",
    "MiningBatch",
    "SentenceEntry",
    "SentenceBaseError",
    "ConfigurationError",
    "StoreError",
    "TokenError",
    "NoTokenError",
    "MalformedTokenError",
    "InvalidTokenTypeError",
    "IatInTheFutureError",
    "ExpiredTokenError",
    "InvalidSubjectError",
    "RevokedTokenError",
    "PendingLimitReachedError",
    "InvalidSentencesProvidedError",
    "NotFoundError",
    "ValidationError",
    "DuplicateUserError",
]
