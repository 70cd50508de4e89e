"""
Identity Directory: accounts, username <-> id resolution and the admin flag.

The core only ever stores ids; this module is where usernames turn into ids
on the way in and back into usernames on the way out.
"""
import hmac
from typing import Iterable, List, Optional

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError

from rapport.core.errors import ForbiddenError, NotFoundError, UnauthorizedError, ValidationError
from rapport.observability.logging import log
from rapport.settings import settings
from rapport.store import follow_repo, user_repo, verification_repo
from rapport.store.models import User

DELETED_USER = "DELETED_USER"
# Placeholder names that render missing accounts; no live account may hold one
RESERVED_USERNAMES = frozenset({DELETED_USER})

PWD = PasswordHasher(
    time_cost=settings.PASSWORD_TIME_COST,
    memory_cost=settings.PASSWORD_MEMORY_COST,
    parallelism=settings.PASSWORD_PARALLELISM,
)


def hash_password(password: str) -> str:
    return PWD.hash(password)


def check_password(password: str, stored: str) -> bool:
    try:
        return PWD.verify(stored or "", password)
    except VerifyMismatchError:
        return False
    except (VerificationError, InvalidHashError):
        # stored value is not a hash this hasher can read
        return False


def _require_text(value: str, what: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{what} must be non-empty!")
    return value


def _require_username(value: str) -> str:
    username = _require_text(value, "Username").strip()
    if username in RESERVED_USERNAMES:
        raise ValidationError(f"{username} is a reserved username.")
    return username


def create_user(username: str, password: str, admin_key: Optional[str] = None) -> User:
    username = _require_username(username)
    _require_text(password, "Password")
    is_admin = False
    if admin_key:
        if not settings.ADMIN_API_KEY or not hmac.compare_digest(admin_key, settings.ADMIN_API_KEY):
            raise ForbiddenError("Invalid admin key.")
        is_admin = True
    user = user_repo.create(username, hash_password(password), is_admin=is_admin)
    log(event="user_created", userId=user.id, username=user.username, isAdmin=user.is_admin)
    return user


def authenticate(username: str, password: str) -> User:
    user = user_repo.get_by_username((username or "").strip())
    if user is None or not check_password(password or "", user.password_hash):
        raise UnauthorizedError("Username or password is incorrect.")
    if PWD.check_needs_rehash(user.password_hash):
        user_repo.set_password_hash(user.id, hash_password(password))
    return user


def get_user_by_id(user_id: str) -> User:
    user = user_repo.get_by_id(user_id)
    if user is None:
        raise NotFoundError("User not found.")
    return user


def get_user_by_username(username: str) -> User:
    user = user_repo.get_by_username(username)
    if user is None:
        raise NotFoundError(f"User with username {username} does not exist!")
    return user


def resolve_id(username: str) -> str:
    return get_user_by_username(username).id


def get_users() -> List[User]:
    return user_repo.list_all()


def is_admin(user_id: str) -> bool:
    user = user_repo.get_by_id(user_id)
    return bool(user and user.is_admin)


def ids_to_usernames(ids: Iterable[str]) -> List[str]:
    ids = list(ids)
    names = user_repo.usernames_for(ids)
    return [names.get(uid, DELETED_USER) for uid in ids]


def update_username(user_id: str, username: str) -> User:
    username = _require_username(username)
    user = user_repo.rename(user_id, username)
    log(event="username_updated", userId=user_id, username=username)
    return user


def update_password(user_id: str, current_password: str, new_password: str) -> None:
    user = get_user_by_id(user_id)
    if not check_password(current_password or "", user.password_hash):
        raise UnauthorizedError("The given current password is wrong!")
    _require_text(new_password, "Password")
    user_repo.set_password_hash(user_id, hash_password(new_password))
    log(event="password_updated", userId=user_id)


def delete_user(user_id: str) -> User:
    """
    Remove the account, then every follow request, follow edge and verification
    entry that names it. Messages stay and render the sender as DELETED_USER.
    """
    user = user_repo.delete(user_id)
    purged = follow_repo.purge_user(user_id)
    verification_repo.purge_user(user_id)
    log(event="user_deleted", userId=user_id, relationsPurged=purged)
    return user
