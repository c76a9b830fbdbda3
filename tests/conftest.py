"""Shared fixtures."""

import pytest

from typed_sheets import MemoryStore, Session, StaticIdentity
from typed_sheets.config import Settings, reset_settings


@pytest.fixture(autouse=True)
def _clean_settings(monkeypatch):
    """Keep environment settings from leaking into tests."""
    for name in ("ID_LENGTH", "DATA_DIR", "ACTOR_EMAIL", "LOG_LEVEL"):
        monkeypatch.delenv(f"TYPED_SHEETS_{name}", raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def store():
    """Create an empty in-memory store."""
    return MemoryStore()


@pytest.fixture
def identity():
    return StaticIdentity("clerk@example.com")


@pytest.fixture
def settings():
    return Settings(_env_file=None)


@pytest.fixture
def session(store, identity, settings):
    """Create a session over the in-memory store."""
    with Session(store, identity, settings) as s:
        yield s
