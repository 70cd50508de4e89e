"""
Explicit route table support.

Every endpoint is one Route entry: (method, path) -> handler plus the capability
the caller must hold. build_router() turns a list of entries into an APIRouter
once, at startup. Handlers declare their own inputs (path/query params, pydantic
bodies, the acting Actor) and FastAPI validates them.
"""
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional

from fastapi import APIRouter, Depends

from rapport.api.auth import require_admin_session, require_api_key, require_logged_out, require_session

PUBLIC = "public"
LOGGED_OUT = "logged_out"
LOGGED_IN = "logged_in"
ADMIN = "admin"

CAPABILITIES = {
    PUBLIC: [],
    LOGGED_OUT: [Depends(require_logged_out)],
    LOGGED_IN: [Depends(require_session)],
    ADMIN: [Depends(require_admin_session)],
}


@dataclass(frozen=True)
class Route:
    method: str
    path: str
    handler: Callable[..., Any]
    capability: str = LOGGED_IN
    response_model: Optional[Any] = None
    tags: tuple = ()


def build_router(routes: Iterable[Route]) -> APIRouter:
    router = APIRouter(dependencies=[Depends(require_api_key)])
    seen = set()
    for route in routes:
        ident = (route.method.upper(), route.path)
        if ident in seen:
            raise ValueError(f"duplicate route {ident[0]} {ident[1]}")
        if route.capability not in CAPABILITIES:
            raise ValueError(f"unknown capability {route.capability!r} for {ident[0]} {ident[1]}")
        seen.add(ident)
        router.add_api_route(
            route.path,
            route.handler,
            methods=[route.method.upper()],
            dependencies=CAPABILITIES[route.capability],
            response_model=route.response_model,
            tags=list(route.tags),
            name=route.handler.__name__,
        )
    return router
