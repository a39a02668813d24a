#!/usr/bin/env python3
"""
Integration tests for the mining workflow - full journey over a database file.

Tests the complete user journey:
1. Analyze a sentence → pick a word
2. Queue sentences → pending list in priority order
3. Commit a selection → batch created, words mined
4. Mine a committed word again → back in the pending list
5. Log out → every token revoked
"""

import json
import os
import threading

import pytest

from sentence_base.core import InvalidSentencesProvidedError
from sentence_base.io import DatabaseManager, UserRepository
from sentence_base.main import analyze_main, build_coordinator, main
from sentence_base.services import BatchCommitter, TokenKind, TokenService


@pytest.fixture
def coordinator(settings, db, catalog):
    return build_coordinator(settings, db, catalog=catalog)


@pytest.fixture
def auth(tokens, user):
    return f"Bearer {tokens.issue(user, TokenKind.ACCESS)}"


def test_full_mining_journey(coordinator, auth):
    # 1. Analyze and pick the noun
    morphemes = coordinator.analyze(auth, "猫が走った").data["morphemes"]
    cat = next(m for m in morphemes if m["morpheme"] == "猫")
    run = next(m for m in morphemes if m["dictionary_form"] == "走る")

    # 2. Queue sentences for the picked words
    coordinator.add_sentence(auth, cat["dictionary_form"], cat["reading"], "猫が走った")
    coordinator.add_sentence(auth, run["dictionary_form"], run["reading"], "猫が走った")
    coordinator.add_sentence(auth, cat["dictionary_form"], cat["reading"], "猫が寝ている")

    pending = coordinator.get_sentences(auth).data["sentences"]
    assert [s["dictionary_form"] for s in pending] == ["猫", "猫", "走る"]

    # 3. Commit the cat sentences
    cat_ids = [s["sentence_id"] for s in pending if s["dictionary_form"] == "猫"]
    batch_id = coordinator.new_batch(auth, cat_ids).data["batch_id"]

    remaining = coordinator.get_sentences(auth).data["sentences"]
    assert [s["dictionary_form"] for s in remaining] == ["走る"]
    batch = coordinator.get_batch(auth, batch_id).data["sentences"]
    assert {s["sentence"] for s in batch} == {"猫が走った", "猫が寝ている"}
    assert all(s["is_mined"] for s in batch)

    # 4. Mining the committed word again un-mines it
    again = coordinator.add_sentence(auth, "猫", cat["reading"], "猫がいる").data["sentence"]
    assert again["is_mined"] is False
    assert again["mining_frequency"] == 3

    # 5. Logout revokes the session
    assert coordinator.logout(auth).status == "success"
    assert coordinator.get_sentences(auth).message == "Revoked Token Provided"


def test_state_survives_reopening_database(settings, tmp_path, catalog):
    path = tmp_path / "persistent.db"

    db = DatabaseManager(path)
    coordinator = build_coordinator(settings, db, catalog=catalog)
    user = UserRepository(db).add_user("reader", "reader@example.com", "digest")
    auth = f"Bearer {TokenService(settings).issue(user, TokenKind.ACCESS)}"
    sentence_id = coordinator.add_sentence(auth, "家", "イエ", "家に帰る").data["sentence"]["sentence_id"]
    db.close()

    reopened = DatabaseManager(path)
    try:
        coordinator = build_coordinator(settings, reopened, catalog=catalog)
        sentences = coordinator.get_sentences(auth).data["sentences"]
        assert [s["sentence_id"] for s in sentences] == [sentence_id]
    finally:
        reopened.close()


def test_concurrent_commits_of_same_selection(db, queue, user):
    ids = [
        queue.admit(user, "猫", "ネコ", "猫がいる").sentence_id,
        queue.admit(user, "犬", "イヌ", "犬がいる").sentence_id,
    ]
    outcomes = []
    lock = threading.Lock()

    def commit():
        manager = DatabaseManager(db.db_path)
        try:
            BatchCommitter(manager).commit(user, ids)
            result = "committed"
        except InvalidSentencesProvidedError:
            result = "rejected"
        finally:
            manager.close()
        with lock:
            outcomes.append(result)

    threads = [threading.Thread(target=commit) for _ in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert sorted(outcomes) == ["committed", "rejected", "rejected", "rejected"]


def test_main_prepares_database(tmp_path, clean_env):
    os.environ["TOKEN_SIGNING_SECRET"] = "integration-secret-0123456789-abcdef"
    os.environ["DATABASE_PATH"] = str(tmp_path / "main.db")

    assert main(project_root=tmp_path) == 0
    assert (tmp_path / "main.db").exists()


def test_analyze_main_prints_json(capsys):
    assert analyze_main(["これはペンです。"]) == 0

    morphemes = json.loads(capsys.readouterr().out)
    assert [m["morpheme"] for m in morphemes] == ["これ", "は", "ペン", "です", "。"]


def test_analyze_main_without_text(capsys):
    assert analyze_main([]) == 2
    assert "usage" in capsys.readouterr().err
