"""Error taxonomy shared by every layer."""

from typing import List, Optional


class SentenceBaseError(Exception):
    """Base exception for all sentence-base errors."""

    message = "Unexpected Error"

    def __init__(self, message: Optional[str] = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class ConfigurationError(SentenceBaseError):
    """Corrupt or missing configuration detected at startup."""


class StoreError(SentenceBaseError):
    """Transport or integrity failure from the store not classified elsewhere."""


class TokenError(SentenceBaseError):
    """Authentication failure; every subclass is reported as unauthorized."""


class NoTokenError(TokenError):
    message = "No Token Provided"


class MalformedTokenError(TokenError):
    message = "Malformed Token Provided"


class InvalidTokenTypeError(TokenError):
    message = "Token with Invalid Type Provided"


class IatInTheFutureError(TokenError):
    message = "Token with IAT in the Future Provided"


class ExpiredTokenError(TokenError):
    message = "Expired Token Provided"


class InvalidSubjectError(TokenError):
    message = "Token with Invalid Subject Provided"


class RevokedTokenError(TokenError):
    message = "Revoked Token Provided"


class PendingLimitReachedError(SentenceBaseError):
    message = "Pending Sentences Limit Reached"


class InvalidSentencesProvidedError(SentenceBaseError):
    message = "Invalid Sentences Provided"


class NotFoundError(SentenceBaseError):
    """Lookup miss; never distinguishes absent from owned by someone else."""

    message = "Not Found"


class ValidationError(SentenceBaseError):
    message = "Validation Error"

    def __init__(self, reasons: Optional[List[str]] = None) -> None:
        super().__init__()
        self.reasons = list(reasons or [])


class DuplicateUserError(SentenceBaseError):
    """Username or email already taken."""

    message = "Validation Error"

    def __init__(self, field: str) -> None:
        super().__init__()
        self.field = field
        self.reasons = [f"duplicate {field}"]
