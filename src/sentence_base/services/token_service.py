"""Token Service - stateless access / refresh tokens with generation-based revocation."""

import logging
import time
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Callable, Optional

import jwt

from sentence_base.core import (
    ExpiredTokenError,
    IatInTheFutureError,
    InvalidSubjectError,
    InvalidTokenTypeError,
    MalformedTokenError,
    RevokedTokenError,
    User,
)
from sentence_base.io import UserRepository
from sentence_base.services.settings_manager import SettingsManager

logger = logging.getLogger(__name__)

SIGNING_ALGORITHM = "HS256"
REQUIRED_CLAIMS = ("iat", "exp", "sub", "gen", "typ")


class TokenKind(str, Enum):
    ACCESS = "access"
    REFRESH = "refresh"


@dataclass(frozen=True)
class TokenClaims:
    """Claims carried by every token.

    ``sub`` is the user id as a decimal string; ``gen`` is the user's token
    generation when the token was issued.
    """

    iat: int
    exp: int
    sub: str
    gen: int
    typ: TokenKind

    def to_dict(self) -> dict:
        data = asdict(self)
        data["typ"] = self.typ.value
        return data


class TokenService:
    """
    Issues and verifies HMAC-signed tokens.

    The signing secret is read once at construction and never changes;
    lifetimes are read from settings on each issue.
    """

    def __init__(self, settings: SettingsManager, clock: Optional[Callable[[], float]] = None):
        """
        Args:
            settings: Source of the signing secret and token lifetimes.
            clock: Returns seconds since the epoch. Defaults to ``time.time``.

        Raises:
            ConfigurationError: If no signing secret is configured.
        """
        self._settings = settings
        self._secret = settings.get_token_signing_secret()
        self._clock = clock or time.time

    def now(self) -> int:
        return int(self._clock())

    def issue(self, user: User, kind: TokenKind) -> str:
        """Sign a fresh token of ``kind`` for ``user``."""
        now = self.now()
        if kind is TokenKind.ACCESS:
            ttl = self._settings.get_access_token_ttl()
        else:
            ttl = self._settings.get_refresh_token_ttl()

        claims = TokenClaims(
            iat=now,
            exp=now + ttl,
            sub=str(user.id),
            gen=user.token_generation,
            typ=kind,
        )
        return self.encode_claims(claims)

    def encode_claims(self, claims: TokenClaims) -> str:
        return jwt.encode(claims.to_dict(), self._secret, algorithm=SIGNING_ALGORITHM)

    def verify(self, token: str, expected_kind: TokenKind, users: UserRepository) -> User:
        """
        Resolve a token to its user.

        Checks run in a fixed order and the first failure wins.

        Raises:
            MalformedTokenError: Bad signature, undecodable token or bad claims.
            InvalidTokenTypeError: ``typ`` differs from ``expected_kind``.
            IatInTheFutureError: Issued after now.
            ExpiredTokenError: ``exp`` is now or earlier.
            InvalidSubjectError: No user with the subject id.
            RevokedTokenError: The user's token generation moved on.
        """
        claims = self._decode(token)
        now = self.now()

        if claims["typ"] != expected_kind.value:
            raise InvalidTokenTypeError()
        if claims["iat"] > now:
            raise IatInTheFutureError()
        if claims["exp"] <= now:
            raise ExpiredTokenError()

        try:
            user_id = int(claims["sub"])
        except ValueError:
            raise InvalidSubjectError() from None
        user = users.find_by_id(user_id)
        if user is None:
            raise InvalidSubjectError()

        if claims["gen"] != user.token_generation:
            raise RevokedTokenError()

        return user

    def _decode(self, token: str) -> dict:
        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[SIGNING_ALGORITHM],
                # Time-based claims are checked by verify() in a fixed order.
                options={"verify_exp": False, "verify_iat": False, "verify_nbf": False},
            )
        except jwt.InvalidTokenError as e:
            logger.debug("Rejected undecodable token: %s", type(e).__name__)
            raise MalformedTokenError() from e

        if not all(name in claims for name in REQUIRED_CLAIMS):
            raise MalformedTokenError()
        for name in ("iat", "exp", "gen"):
            if not isinstance(claims[name], int) or isinstance(claims[name], bool):
                raise MalformedTokenError()
        if not isinstance(claims["sub"], str) or not isinstance(claims["typ"], str):
            raise MalformedTokenError()
        return claims
