from dataclasses import dataclass

from rapport.core.errors import ForbiddenError


@dataclass(frozen=True)
class Actor:
    """
    The acting identity of one request, resolved by the Session Context and
    passed explicitly into every core operation that an actor constrains.
    """
    user_id: str
    username: str = ""
    is_admin: bool = False


def require_admin(actor: Actor, action: str) -> None:
    if not actor.is_admin:
        raise ForbiddenError(f"You do not have permission to {action}.")
