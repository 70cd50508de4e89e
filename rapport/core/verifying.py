"""
Verification Workflow.

    unverified --create_verification_request--> pending
    pending --approve_request--> verified      (VerifiedRecord written)
    pending --reject_request--> unverified     (request dropped)
    verified --delete_verified--> unverified

Admin-only transitions check the actor here, not in the route layer, so no
caller can skip them. A user may request again after a rejection or a
revocation; while a request is pending or the user is verified a new request
is a conflict.
"""
from dataclasses import dataclass
from typing import Generic, List, Optional, TypeVar

from rapport.core.context import Actor, require_admin
from rapport.core.errors import ValidationError
from rapport.observability import metrics
from rapport.observability.logging import log
from rapport.settings import settings
from rapport.store import verification_repo
from rapport.store.models import VerificationRequest, VerifiedRecord

T = TypeVar("T")


@dataclass
class Page(Generic[T]):
    items: List[T]
    offset: int
    limit: int
    total: int


def clamp_page(offset: Optional[int], limit: Optional[int]):
    offset = 0 if offset is None else int(offset)
    limit = settings.DEFAULT_PAGE_SIZE if limit is None else int(limit)
    if offset < 0:
        raise ValidationError("offset must be >= 0")
    if limit < 1:
        raise ValidationError("limit must be >= 1")
    return offset, min(limit, settings.MAX_PAGE_SIZE)


def create_verification_request(actor: Actor, credentials: str) -> VerificationRequest:
    credentials = (credentials or "").strip()
    if not credentials:
        raise ValidationError("Missing credentials.")
    req = verification_repo.create_request(actor.user_id, credentials)
    log(event="verification_requested", user=actor.user_id, credentials=credentials)
    metrics.increment("verification_requested")
    return req


def get_request_by_user(user_id: str) -> Optional[VerificationRequest]:
    return verification_repo.get_request(user_id)


def approve_request(actor: Actor, user_id: str) -> VerificationRequest:
    require_admin(actor, "approve requests")
    req, _ = verification_repo.resolve_request(user_id, approve=True, admin_id=actor.user_id)
    log(event="verification_approved", user=user_id, admin=actor.user_id)
    metrics.increment("verification_approved")
    return req


def reject_request(actor: Actor, user_id: str) -> VerificationRequest:
    require_admin(actor, "reject requests")
    req, _ = verification_repo.resolve_request(user_id, approve=False, admin_id=actor.user_id)
    log(event="verification_rejected", user=user_id, admin=actor.user_id)
    metrics.increment("verification_rejected")
    return req


def is_verified(user_id: str) -> bool:
    return verification_repo.is_verified(user_id)


def delete_verified(actor: Actor, user_id: str) -> VerifiedRecord:
    require_admin(actor, "remove verification")
    record = verification_repo.delete_record(user_id)
    log(event="verification_revoked", user=user_id, admin=actor.user_id)
    metrics.increment("verification_revoked")
    return record


def get_all_verified(actor: Actor, offset: Optional[int] = None, limit: Optional[int] = None) -> Page[VerifiedRecord]:
    require_admin(actor, "view all verified users")
    offset, limit = clamp_page(offset, limit)
    items, total = verification_repo.page_verified(offset, limit)
    return Page(items=items, offset=offset, limit=limit, total=total)


def get_all_requests(actor: Actor, offset: Optional[int] = None, limit: Optional[int] = None) -> Page[VerificationRequest]:
    require_admin(actor, "view all requests")
    offset, limit = clamp_page(offset, limit)
    items, total = verification_repo.page_pending(offset, limit)
    return Page(items=items, offset=offset, limit=limit, total=total)
