import secrets
from typing import Optional

from rapport.store.redis_conn import get_redis, key
from rapport.settings import settings

PREFIX = "session"


def _key(token: str) -> str:
    return key(PREFIX, token)


def start_session(user_id: str) -> str:
    r = get_redis()
    token = secrets.token_urlsafe(32)
    r.set(_key(token), user_id, ex=settings.SESSION_TTL_SEC)
    return token


def load_session(token: str) -> Optional[str]:
    """User id bound to token, or None when missing/expired."""
    if not token:
        return None
    r = get_redis()
    return r.get(_key(token))


def end_session(token: str) -> bool:
    if not token:
        return False
    r = get_redis()
    return bool(r.delete(_key(token)))
