from fastapi import Depends, Header, Request

from rapport.core import sessioning
from rapport.core.context import Actor, require_admin
from rapport.core.errors import UnauthorizedError
from rapport.settings import settings


def require_api_key(x_api_key: str = Header(default="", alias="x-api-key")):
    """
    Shared API key is OPTIONAL.
    - If API_KEY env is empty: allow all requests.
    - If API_KEY env is set: require matching x-api-key header.
    """
    if not getattr(settings, "API_KEY", ""):
        return
    if x_api_key != settings.API_KEY:
        raise UnauthorizedError("Invalid API key")


def session_token(request: Request) -> str:
    return request.headers.get(settings.SESSION_HEADER, "")


def require_session(token: str = Depends(session_token)) -> Actor:
    return sessioning.get_actor(token)


def require_logged_out(token: str = Depends(session_token)) -> None:
    sessioning.assert_logged_out(token)


def require_admin_session(actor: Actor = Depends(require_session)) -> Actor:
    require_admin(actor, "access this route")
    return actor
