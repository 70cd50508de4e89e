import fakeredis
import pytest
from argon2 import PasswordHasher

import rapport.observability.metrics as metrics
from rapport.core import identity
from rapport.core.context import Actor
from rapport.store import follow_repo, message_repo, session_repo, user_repo, verification_repo

REDIS_MODULES = (follow_repo, message_repo, session_repo, user_repo, verification_repo, metrics)


@pytest.fixture
def fake_redis(monkeypatch):
    """One in-memory Redis shared by every store module for the test."""
    server = fakeredis.FakeServer()
    client = fakeredis.FakeRedis(server=server, decode_responses=True)
    for module in REDIS_MODULES:
        monkeypatch.setattr(module, "get_redis", lambda: client)
    return client


@pytest.fixture(autouse=True)
def fast_password_hashing(monkeypatch):
    monkeypatch.setattr(identity, "PWD", PasswordHasher(time_cost=1, memory_cost=8, parallelism=1))


def _make_actor(username: str, is_admin: bool = False) -> Actor:
    user = user_repo.create(username, identity.hash_password("pw"), is_admin=is_admin)
    return Actor(user_id=user.id, username=user.username, is_admin=user.is_admin)


@pytest.fixture
def make_actor(fake_redis):
    return _make_actor


@pytest.fixture
def alice(fake_redis):
    return _make_actor("alice")


@pytest.fixture
def bob(fake_redis):
    return _make_actor("bob")


@pytest.fixture
def carol(fake_redis):
    return _make_actor("carol")


@pytest.fixture
def admin(fake_redis):
    return _make_actor("root", is_admin=True)
