"""
Tests for MiningCoordinator - validates authentication, delegation and envelopes.
"""

import os
import threading
from http import HTTPStatus

import pytest

from sentence_base.core import StoreError
from sentence_base.main import build_coordinator
from sentence_base.services import FrequencyCatalog, PendingQueue, TokenKind


@pytest.fixture
def coordinator(settings, db, catalog):
    return build_coordinator(settings, db, catalog=catalog)


@pytest.fixture
def auth(tokens, user):
    return f"Bearer {tokens.issue(user, TokenKind.ACCESS)}"


def _add(coordinator, auth, dictionary_form="猫", reading="ネコ", sentence="猫がいる。"):
    response = coordinator.add_sentence(auth, dictionary_form, reading, sentence)
    assert response.status == "success", response
    return response.data["sentence"]["sentence_id"]


class TestAuthentication:
    """Every route except refresh requires a valid access token."""

    @pytest.mark.parametrize(
        "call",
        [
            lambda c, a: c.analyze(a, "猫"),
            lambda c, a: c.me(a),
            lambda c, a: c.logout(a),
            lambda c, a: c.add_sentence(a, "猫", "ネコ", "猫がいる。"),
            lambda c, a: c.get_sentences(a),
            lambda c, a: c.delete_sentence(a, 1),
            lambda c, a: c.new_batch(a, [1]),
            lambda c, a: c.get_batch(a, 1),
            lambda c, a: c.get_all_batches(a),
        ],
    )
    def test_missing_token_is_unauthorized(self, coordinator, call):
        response = call(coordinator, None)

        assert response.http_status == HTTPStatus.UNAUTHORIZED
        assert response.to_dict() == {"status": "fail", "message": "No Token Provided"}

    def test_refresh_token_cannot_authenticate(self, coordinator, tokens, user):
        response = coordinator.me(f"Bearer {tokens.issue(user, TokenKind.REFRESH)}")

        assert response.http_status == HTTPStatus.UNAUTHORIZED
        assert response.message == "Token with Invalid Type Provided"

    def test_unauthorized_call_has_no_effect(self, coordinator, user, db):
        coordinator.add_sentence("Bearer garbage", "猫", "ネコ", "猫がいる。")

        count = db.connection.execute("SELECT COUNT(*) FROM sentences").fetchone()[0]
        assert count == 0


class TestSessionRoutes:
    def test_me(self, coordinator, auth, user):
        response = coordinator.me(auth)

        assert response.to_dict() == {
            "status": "success",
            "data": {"id": user.id, "username": "test", "email": "example@domain.com"},
        }

    def test_refresh_returns_working_pair(self, coordinator, tokens, user):
        response = coordinator.refresh(tokens.issue(user, TokenKind.REFRESH))

        assert response.status == "success"
        assert coordinator.me(f"Bearer {response.data['access_token']}").status == "success"
        assert coordinator.refresh(response.data["refresh_token"]).status == "success"

    def test_refresh_rejects_access_token(self, coordinator, auth):
        response = coordinator.refresh(auth.split(" ", 1)[1])

        assert response.http_status == HTTPStatus.UNAUTHORIZED
        assert response.message == "Token with Invalid Type Provided"

    def test_refresh_requires_token(self, coordinator):
        response = coordinator.refresh("")
        assert response.http_status == HTTPStatus.UNPROCESSABLE_ENTITY

    def test_logout_revokes_outstanding_tokens(self, coordinator, tokens, user, auth):
        refresh_token = tokens.issue(user, TokenKind.REFRESH)

        assert coordinator.logout(auth).status == "success"

        assert coordinator.me(auth).message == "Revoked Token Provided"
        assert coordinator.refresh(refresh_token).message == "Revoked Token Provided"


class TestAnalyze:
    def test_returns_morphemes(self, coordinator, auth):
        response = coordinator.analyze(auth, "これはペンです。")

        morphemes = response.data["morphemes"]
        assert [m["morpheme"] for m in morphemes] == ["これ", "は", "ペン", "です", "。"]
        assert morphemes[0]["dictionary_form"] == "これ"
        assert morphemes[0]["reading"] == "コレ"
        assert isinstance(morphemes[0]["features"], list)

    def test_empty_sentence_is_validation_error(self, coordinator, auth):
        response = coordinator.analyze(auth, "")

        assert response.http_status == HTTPStatus.UNPROCESSABLE_ENTITY
        assert response.reasons


class TestSentenceRoutes:
    def test_add_sentence_returns_entry(self, coordinator, auth):
        response = coordinator.add_sentence(auth, "猫", "ネコ", "猫がいる。")

        entry = response.data["sentence"]
        assert entry["sentence"] == "猫がいる。"
        assert entry["mining_frequency"] == 1
        assert entry["is_mined"] is False
        assert isinstance(entry["frequency"], int)

    def test_get_sentences_in_priority_order(self, coordinator, auth):
        _add(coordinator, auth, "ペン", "ペン", "ペンだ。")
        _add(coordinator, auth, "猫", "ネコ", "猫だ。")
        _add(coordinator, auth, "猫", "ネコ", "猫もだ。")

        response = coordinator.get_sentences(auth)

        assert [s["sentence"] for s in response.data["sentences"]] == ["猫だ。", "猫もだ。", "ペンだ。"]

    def test_pending_limit_is_throttled(self, coordinator, auth):
        os.environ["MAX_PENDING_SENTENCES"] = "1"
        _add(coordinator, auth)

        response = coordinator.add_sentence(auth, "犬", "イヌ", "犬だ。")

        assert response.http_status == HTTPStatus.TOO_MANY_REQUESTS
        assert response.message == "Pending Sentences Limit Reached"

    def test_delete_sentence(self, coordinator, auth):
        sentence_id = _add(coordinator, auth)

        response = coordinator.delete_sentence(auth, sentence_id)

        assert response.to_dict() == {"status": "success", "data": None}
        assert coordinator.get_sentences(auth).data == {"sentences": []}

    def test_delete_unknown_sentence_not_found(self, coordinator, auth):
        response = coordinator.delete_sentence(auth, 9999)
        assert response.http_status == HTTPStatus.NOT_FOUND


class TestBatchRoutes:
    def test_new_batch_then_get_batch(self, coordinator, auth):
        ids = [_add(coordinator, auth), _add(coordinator, auth, "犬", "イヌ", "犬だ。")]

        created = coordinator.new_batch(auth, ids)
        fetched = coordinator.get_batch(auth, created.data["batch_id"])

        assert [s["sentence_id"] for s in fetched.data["sentences"]] == ids
        assert all(s["is_mined"] for s in fetched.data["sentences"])

    def test_new_batch_twice_is_invalid(self, coordinator, auth):
        ids = [_add(coordinator, auth)]
        coordinator.new_batch(auth, ids)

        response = coordinator.new_batch(auth, ids)

        assert response.http_status == HTTPStatus.UNPROCESSABLE_ENTITY
        assert response.message == "Invalid Sentences Provided"

    def test_empty_batch_is_validation_error(self, coordinator, auth):
        response = coordinator.new_batch(auth, [])
        assert response.message == "Validation Error"

    def test_get_all_batches(self, coordinator, auth, user):
        first = coordinator.new_batch(auth, [_add(coordinator, auth)]).data["batch_id"]
        second = coordinator.new_batch(auth, [_add(coordinator, auth)]).data["batch_id"]

        batches = coordinator.get_all_batches(auth).data["batches"]

        assert [b["id"] for b in batches] == [second, first]
        assert all(b["user_id"] == user.id for b in batches)

    def test_other_users_batch_not_found(self, coordinator, auth, tokens, other_user):
        batch_id = coordinator.new_batch(auth, [_add(coordinator, auth)]).data["batch_id"]
        other_auth = f"Bearer {tokens.issue(other_user, TokenKind.ACCESS)}"

        response = coordinator.get_batch(other_auth, batch_id)

        assert response.http_status == HTTPStatus.NOT_FOUND
        assert response.to_dict() == coordinator.get_batch(other_auth, 9999).to_dict()


def test_store_failure_is_opaque_server_error(coordinator, auth, monkeypatch):
    def fail(self, user):
        raise StoreError("database is locked")

    monkeypatch.setattr(PendingQueue, "list_pending", fail)

    response = coordinator.get_sentences(auth)

    assert response.http_status == HTTPStatus.INTERNAL_SERVER_ERROR
    assert response.to_dict() == {"status": "error", "message": "Unexpected Error"}


def test_unexpected_exception_is_opaque_server_error(coordinator, auth):
    response = coordinator.new_batch(auth, None)

    assert response.http_status == HTTPStatus.INTERNAL_SERVER_ERROR
    assert response.to_dict() == {"status": "error", "message": "Unexpected Error"}


def test_blank_sentence_is_validation_error(coordinator, auth):
    response = coordinator.add_sentence(auth, "猫", "ネコ", "   ")

    assert response.http_status == HTTPStatus.UNPROCESSABLE_ENTITY
    assert response.reasons == ['field "sentence" must be a non-empty string']


def test_injected_empty_catalog_is_used(settings, db, auth):
    coordinator = build_coordinator(settings, db, catalog=FrequencyCatalog([]))

    entry = coordinator.add_sentence(auth, "猫", "ネコ", "猫がいる。").data["sentence"]

    assert entry["frequency"] == 1


def test_serves_requests_from_worker_threads(coordinator, tokens, user, other_user):
    """A coordinator built on one thread answers calls made on others."""
    headers = {
        user.id: f"Bearer {tokens.issue(user, TokenKind.ACCESS)}",
        other_user.id: f"Bearer {tokens.issue(other_user, TokenKind.ACCESS)}",
    }
    responses = []
    lock = threading.Lock()

    def serve(user_id, index):
        auth = headers[user_id]
        added = coordinator.add_sentence(auth, "猫", "ネコ", f"猫{index}匹目。")
        listed = coordinator.get_sentences(auth)
        with lock:
            responses.extend([added, listed])

    threads = [
        threading.Thread(target=serve, args=(user_id, index))
        for index in range(4)
        for user_id in headers
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert [r.status for r in responses] == ["success"] * len(responses)
    for auth in headers.values():
        sentences = coordinator.get_sentences(auth).data["sentences"]
        assert len(sentences) == 4
        assert {s["mining_frequency"] for s in sentences} == {4}
