"""Shared fixtures: a temporary store, configured settings and test users."""

import os

import pytest

from sentence_base.io import DatabaseManager, UserRepository
from sentence_base.services import (
    BatchCommitter,
    BatchReader,
    FrequencyCatalog,
    PendingQueue,
    SettingsManager,
    TokenService,
    WordLedger,
)

TEST_SECRET = "test-signing-secret-0123456789-abcdefghijklmnop"
SETTINGS_ENV_VARS = (
    "TOKEN_SIGNING_SECRET",
    "ACCESS_TOKEN_TTL_SECONDS",
    "REFRESH_TOKEN_TTL_SECONDS",
    "MAX_PENDING_SENTENCES",
    "DATABASE_PATH",
)


@pytest.fixture
def clean_env():
    """Remove settings variables before the test and restore them after."""
    saved = {name: os.environ.pop(name, None) for name in SETTINGS_ENV_VARS}
    yield
    for name, value in saved.items():
        if value is not None:
            os.environ[name] = value
        else:
            os.environ.pop(name, None)


@pytest.fixture
def settings(tmp_path, clean_env):
    """SettingsManager rooted in an empty directory with a signing secret set."""
    os.environ["TOKEN_SIGNING_SECRET"] = TEST_SECRET
    return SettingsManager(project_root=tmp_path)


@pytest.fixture
def db(tmp_path):
    manager = DatabaseManager(tmp_path / "mining.db")
    manager.ensure_schema()
    yield manager
    manager.close()


@pytest.fixture
def users(db):
    return UserRepository(db)


@pytest.fixture
def user(users):
    return users.add_user("test", "Example@Domain.com", "digest")


@pytest.fixture
def other_user(users):
    return users.add_user("other", "other@domain.com", "digest")


@pytest.fixture
def catalog():
    """The frequency list bundled with the package."""
    return FrequencyCatalog.from_file()


@pytest.fixture
def tokens(settings):
    return TokenService(settings)


@pytest.fixture
def ledger(db):
    return WordLedger(db)


@pytest.fixture
def queue(db, ledger, catalog, settings):
    return PendingQueue(db, ledger, catalog, settings)


@pytest.fixture
def committer(db):
    return BatchCommitter(db)


@pytest.fixture
def reader(db, catalog):
    return BatchReader(db, catalog)
