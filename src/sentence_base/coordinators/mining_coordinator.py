"""Mining Coordinator - turns raw request inputs into response envelopes."""

import logging
from typing import Callable, Iterable, Optional, Union

from sentence_base.core import User, ValidationError
from sentence_base.coordinators.responses import ErrorResponse, SuccessResponse, error_to_response
from sentence_base.io import UserRepository
from sentence_base.services import (
    BatchCommitter,
    BatchReader,
    IdentityGate,
    MorphologyService,
    PendingQueue,
    TokenKind,
    TokenService,
)

logger = logging.getLogger(__name__)

Response = Union[SuccessResponse, ErrorResponse]


class MiningCoordinator:
    """
    Boundary between a transport (HTTP or otherwise) and the mining core.

    Responsibilities:
    - Authenticate every call except ``refresh`` through the IdentityGate
    - Delegate to the services
    - Translate core exceptions into fail / error envelopes

    Each method maps to one route of the service:
    analyze, me, refresh, logout, add_sentence, get_sentences,
    delete_sentence, new_batch, get_batch, get_all_batches.
    """

    def __init__(
        self,
        identity_gate: IdentityGate,
        tokens: TokenService,
        users: UserRepository,
        morphology: MorphologyService,
        pending_queue: PendingQueue,
        batch_committer: BatchCommitter,
        batch_reader: BatchReader,
    ):
        self.identity_gate = identity_gate
        self.tokens = tokens
        self.users = users
        self.morphology = morphology
        self.pending_queue = pending_queue
        self.batch_committer = batch_committer
        self.batch_reader = batch_reader

    def analyze(self, authorization: Optional[str], sentence: str) -> Response:
        def action(user: User) -> dict:
            if not sentence:
                raise ValidationError(['field "sentence" must be a non-empty string'])
            morphemes = self.morphology.analyze(sentence)
            return {"morphemes": [morpheme.to_dict() for morpheme in morphemes]}

        return self._authenticated(authorization, action)

    def me(self, authorization: Optional[str]) -> Response:
        return self._authenticated(authorization, lambda user: user.to_dict())

    def refresh(self, refresh_token: Optional[str]) -> Response:
        """Exchange a refresh token for a new access / refresh pair."""
        def action() -> dict:
            if not refresh_token:
                raise ValidationError(['field "refresh_token" must be a non-empty string'])
            user = self.tokens.verify(refresh_token, TokenKind.REFRESH, self.users)
            return self._token_pair(user)

        return self._respond(action)

    def logout(self, authorization: Optional[str]) -> Response:
        """Revoke every token issued to the caller."""
        def action(user: User) -> None:
            self.users.increment_token_generation(user.id)
            logger.info("Revoked all tokens of user %d", user.id)

        return self._authenticated(authorization, action)

    def add_sentence(
        self,
        authorization: Optional[str],
        dictionary_form: str,
        reading: str,
        sentence: str,
    ) -> Response:
        def action(user: User) -> dict:
            entry = self.pending_queue.admit(user, dictionary_form, reading, sentence)
            return {"sentence": entry.to_dict()}

        return self._authenticated(authorization, action)

    def get_sentences(self, authorization: Optional[str]) -> Response:
        def action(user: User) -> dict:
            entries = self.pending_queue.list_pending(user)
            return {"sentences": [entry.to_dict() for entry in entries]}

        return self._authenticated(authorization, action)

    def delete_sentence(self, authorization: Optional[str], sentence_id: int) -> Response:
        return self._authenticated(
            authorization, lambda user: self.pending_queue.delete_pending(user, sentence_id)
        )

    def new_batch(self, authorization: Optional[str], sentence_ids: Iterable[int]) -> Response:
        def action(user: User) -> dict:
            batch = self.batch_committer.commit(user, sentence_ids)
            return {"batch_id": batch.id}

        return self._authenticated(authorization, action)

    def get_batch(self, authorization: Optional[str], batch_id: int) -> Response:
        def action(user: User) -> dict:
            batch = self.batch_reader.get_batch(user, batch_id)
            entries = self.batch_reader.list_batch_sentences(user, batch)
            return {"sentences": [entry.to_dict() for entry in entries]}

        return self._authenticated(authorization, action)

    def get_all_batches(self, authorization: Optional[str]) -> Response:
        def action(user: User) -> dict:
            batches = self.batch_reader.list_batches(user)
            return {"batches": [batch.to_dict() for batch in batches]}

        return self._authenticated(authorization, action)

    def _token_pair(self, user: User) -> dict:
        return {
            "access_token": self.tokens.issue(user, TokenKind.ACCESS),
            "refresh_token": self.tokens.issue(user, TokenKind.REFRESH),
        }

    def _authenticated(self, authorization: Optional[str], action: Callable[[User], object]) -> Response:
        return self._respond(lambda: action(self.identity_gate.authenticate(authorization)))

    @staticmethod
    def _respond(action: Callable[[], object]) -> Response:
        try:
            return SuccessResponse(action())
        except Exception as e:
            return error_to_response(e)
