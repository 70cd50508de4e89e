"""
Redis persistence for the Identity Directory.

user:{id} holds the account hash, users:by_name maps username -> id and
users:all (zset, created ms) gives a stable listing order. Username changes
swap the by_name entry inside one transaction so two renames cannot claim
the same name.
"""
import uuid
from typing import Dict, Iterable, List, Optional

from redis.client import Pipeline

from rapport.core.errors import ConflictError, NotFoundError
from rapport.store.models import User
from rapport.store.redis_conn import get_redis, key
from rapport.utils.time import now_ms


def _user(user_id: str) -> str:
    return key("user", user_id)


def _by_name() -> str:
    return key("users", "by_name")


def _all() -> str:
    return key("users", "all")


def create(username: str, password_hash: str, is_admin: bool = False) -> User:
    r = get_redis()

    def _tx(pipe: Pipeline) -> User:
        if pipe.hexists(_by_name(), username):
            raise ConflictError("This username is already taken.")
        user = User(
            id=uuid.uuid4().hex,
            username=username,
            password_hash=password_hash,
            is_admin=is_admin,
            created_at=now_ms(),
        )
        pipe.multi()
        pipe.hset(_by_name(), username, user.id)
        pipe.hset(_user(user.id), mapping=user.to_hash())
        pipe.zadd(_all(), {user.id: user.created_at})
        return user

    return r.transaction(_tx, _by_name(), value_from_callable=True)


def get_by_id(user_id: str) -> Optional[User]:
    r = get_redis()
    data = r.hgetall(_user(user_id))
    return User.from_hash(data) if data else None


def get_by_username(username: str) -> Optional[User]:
    r = get_redis()
    user_id = r.hget(_by_name(), username)
    return get_by_id(user_id) if user_id else None


def list_all() -> List[User]:
    r = get_redis()
    ids = r.zrange(_all(), 0, -1)
    return [u for u in (get_by_id(uid) for uid in ids) if u is not None]


def usernames_for(ids: Iterable[str]) -> Dict[str, str]:
    """id -> username for the ids that still exist."""
    ids = list(ids)
    if not ids:
        return {}
    r = get_redis()
    pipe = r.pipeline(transaction=False)
    for uid in ids:
        pipe.hget(_user(uid), "username")
    return {uid: name for uid, name in zip(ids, pipe.execute()) if name is not None}


def rename(user_id: str, new_username: str) -> User:
    r = get_redis()

    def _tx(pipe: Pipeline) -> User:
        data = pipe.hgetall(_user(user_id))
        if not data:
            raise NotFoundError("User not found.")
        user = User.from_hash(data)
        owner = pipe.hget(_by_name(), new_username)
        if owner is not None and owner != user_id:
            raise ConflictError("This username is already taken.")
        old_username = user.username
        user.username = new_username
        pipe.multi()
        pipe.hdel(_by_name(), old_username)
        pipe.hset(_by_name(), new_username, user_id)
        pipe.hset(_user(user_id), "username", new_username)
        return user

    return r.transaction(_tx, _by_name(), _user(user_id), value_from_callable=True)


def set_password_hash(user_id: str, password_hash: str) -> None:
    r = get_redis()
    if not r.exists(_user(user_id)):
        raise NotFoundError("User not found.")
    r.hset(_user(user_id), "password_hash", password_hash)


def delete(user_id: str) -> User:
    r = get_redis()

    def _tx(pipe: Pipeline) -> User:
        data = pipe.hgetall(_user(user_id))
        if not data:
            raise NotFoundError("User not found.")
        user = User.from_hash(data)
        pipe.multi()
        pipe.hdel(_by_name(), user.username)
        pipe.delete(_user(user_id))
        pipe.zrem(_all(), user_id)
        return user

    return r.transaction(_tx, _by_name(), _user(user_id), value_from_callable=True)


def set_admin(user_id: str, is_admin: bool) -> None:
    r = get_redis()
    if not r.exists(_user(user_id)):
        raise NotFoundError("User not found.")
    r.hset(_user(user_id), "is_admin", "1" if is_admin else "0")
