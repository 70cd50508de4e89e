from typing import Optional

from rapport.core.context import Actor
from rapport.core.errors import ForbiddenError, UnauthorizedError
from rapport.store import session_repo, user_repo


def start(user_id: str) -> str:
    return session_repo.start_session(user_id)


def end(token: str) -> None:
    session_repo.end_session(token)


def get_actor(token: Optional[str]) -> Actor:
    """Resolve a session token to the acting user, or fail with 401."""
    user_id = session_repo.load_session(token or "")
    if not user_id:
        raise UnauthorizedError("Must be logged in!")
    user = user_repo.get_by_id(user_id)
    if user is None:
        # Account deleted while the token was still live
        session_repo.end_session(token)
        raise UnauthorizedError("Must be logged in!")
    return Actor(user_id=user.id, username=user.username, is_admin=user.is_admin)


def assert_logged_out(token: Optional[str]) -> None:
    if token and session_repo.load_session(token):
        raise ForbiddenError("Must be logged out!")
