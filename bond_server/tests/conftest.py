"""
Pytest configuration for bond_server. In-memory SQLite so tests don't touch the filesystem.
"""
import os
import uuid

# Must be set before bond_server.config is imported
os.environ["BOND_DATABASE_URL"] = "sqlite:///:memory:"

import pytest

from bond_server.access import Claims, Credential
from bond_server.controller import BondController
from bond_server.store import BondStore

NOW = 1_700_000_000


@pytest.fixture
def store():
    """Fresh in-memory database per test."""
    s = BondStore.from_url("sqlite://")
    yield s
    s.close()


@pytest.fixture
def controller(store):
    return BondController(store, clock=lambda: NOW)


@pytest.fixture
def make_claims():
    def _make(*credentials: Credential, user_id: uuid.UUID | None = None, expires_at: int = NOW + 3600) -> Claims:
        return Claims(
            user_id=user_id or uuid.uuid4(),
            expires_at=expires_at,
            credentials={c: True for c in credentials},
        )

    return _make
