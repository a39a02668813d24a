"""Response envelopes and the error-to-envelope translation."""

import logging
from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Any, List, Optional

from sentence_base.core import (
    DuplicateUserError,
    InvalidSentencesProvidedError,
    NotFoundError,
    PendingLimitReachedError,
    SentenceBaseError,
    TokenError,
    ValidationError,
)

logger = logging.getLogger(__name__)

UNEXPECTED_ERROR_MESSAGE = "Unexpected Error"


@dataclass
class SuccessResponse:
    """``{"status": "success", "data": ...}``"""

    data: Any = None
    http_status: HTTPStatus = HTTPStatus.OK

    @property
    def status(self) -> str:
        return "success"

    def to_dict(self) -> dict:
        return {"status": self.status, "data": self.data}


@dataclass
class ErrorResponse:
    """``{"status": "fail" | "error", "message": ..., "reasons"?: [...]}``

    "fail" blames the request, "error" blames the server.
    """

    status: str
    message: str
    http_status: HTTPStatus
    reasons: Optional[List[str]] = field(default=None)

    @classmethod
    def fail(cls, message: str, http_status: HTTPStatus, reasons: Optional[List[str]] = None) -> "ErrorResponse":
        return cls(status="fail", message=message, http_status=http_status, reasons=reasons)

    @classmethod
    def error(cls, message: str, http_status: HTTPStatus) -> "ErrorResponse":
        return cls(status="error", message=message, http_status=http_status)

    def to_dict(self) -> dict:
        data = {"status": self.status, "message": self.message}
        if self.reasons is not None:
            data["reasons"] = list(self.reasons)
        return data


def error_to_response(error: Exception) -> ErrorResponse:
    """Translate an exception raised by the core into an envelope.

    Anything outside the known taxonomy, including ``StoreError``, becomes an
    opaque server error and is logged with its traceback.
    """
    if isinstance(error, TokenError):
        return ErrorResponse.fail(error.message, HTTPStatus.UNAUTHORIZED)
    if isinstance(error, NotFoundError):
        return ErrorResponse.fail(error.message, HTTPStatus.NOT_FOUND)
    if isinstance(error, DuplicateUserError):
        return ErrorResponse.fail(error.message, HTTPStatus.CONFLICT, error.reasons)
    if isinstance(error, ValidationError):
        return ErrorResponse.fail(error.message, HTTPStatus.UNPROCESSABLE_ENTITY, error.reasons)
    if isinstance(error, InvalidSentencesProvidedError):
        return ErrorResponse.fail(error.message, HTTPStatus.UNPROCESSABLE_ENTITY)
    if isinstance(error, PendingLimitReachedError):
        return ErrorResponse.fail(error.message, HTTPStatus.TOO_MANY_REQUESTS)

    if isinstance(error, SentenceBaseError):
        logger.error("Unhandled %s: %s", type(error).__name__, error, exc_info=error)
    else:
        logger.error("Unexpected exception: %s", error, exc_info=error)
    return ErrorResponse.error(UNEXPECTED_ERROR_MESSAGE, HTTPStatus.INTERNAL_SERVER_ERROR)
