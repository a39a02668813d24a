"""Identity Gate - resolves an Authorization header to an authenticated user."""

import logging
import re
from typing import Optional

from sentence_base.core import NoTokenError, TokenError, User
from sentence_base.io import UserRepository
from sentence_base.services.token_service import TokenKind, TokenService

logger = logging.getLogger(__name__)

BEARER_PATTERN = re.compile(r"^Bearer\s+(.+)$")


def extract_bearer_token(authorization_header: Optional[str]) -> Optional[str]:
    """Token part of a ``Bearer <token>`` header, or None."""
    if not authorization_header:
        return None
    match = BEARER_PATTERN.match(authorization_header)
    return match.group(1) if match else None


class IdentityGate:
    """The single entry point through which users enter mutating operations."""

    def __init__(self, tokens: TokenService, users: UserRepository) -> None:
        self._tokens = tokens
        self._users = users

    def authenticate(self, authorization_header: Optional[str]) -> User:
        """
        Authenticate a request by its Authorization header.

        Returns:
            The user the access token was issued to.

        Raises:
            NoTokenError: Header missing or not of the ``Bearer`` form.
            TokenError: Any verification failure of the access token.
        """
        token = extract_bearer_token(authorization_header)
        if token is None:
            raise NoTokenError()
        try:
            return self._tokens.verify(token, TokenKind.ACCESS, self._users)
        except TokenError as e:
            logger.debug("Access token rejected: %s", type(e).__name__)
            raise
