"""
Redis persistence for verification requests and verified records.

verify:request:{user} holds at most one pending request; verify:pending and
verify:verified are zsets (user -> epoch ms) that back the admin listings.
Resolving a request deletes it, the returned object carries the terminal status.
"""
from typing import List, Optional, Tuple

from redis.client import Pipeline

from rapport.core.errors import ConflictError, NotFoundError
from rapport.store.models import APPROVED, PENDING, REJECTED, VerificationRequest, VerifiedRecord
from rapport.store.redis_conn import get_redis, key
from rapport.utils.time import now_ms

K_PENDING = "verify:pending"
K_VERIFIED = "verify:verified"


def _request(user_id: str) -> str:
    return key("verify", "request", user_id)


def _record(user_id: str) -> str:
    return key("verify", "record", user_id)


def _pending() -> str:
    return key(K_PENDING)


def _verified() -> str:
    return key(K_VERIFIED)


def create_request(user_id: str, credentials: str) -> VerificationRequest:
    r = get_redis()

    def _tx(pipe: Pipeline) -> VerificationRequest:
        if pipe.exists(_record(user_id)):
            raise ConflictError("User is already verified.")
        if pipe.exists(_request(user_id)):
            raise ConflictError("A verification request is already pending.")
        req = VerificationRequest(user=user_id, credentials=credentials, status=PENDING, created_at=now_ms())
        pipe.multi()
        pipe.hset(_request(user_id), mapping=req.to_hash())
        pipe.zadd(_pending(), {user_id: req.created_at})
        return req

    return r.transaction(_tx, _request(user_id), _record(user_id), value_from_callable=True)


def get_request(user_id: str) -> Optional[VerificationRequest]:
    r = get_redis()
    data = r.hgetall(_request(user_id))
    return VerificationRequest.from_hash(data) if data else None


def resolve_request(user_id: str, approve: bool, admin_id: str) -> Tuple[VerificationRequest, Optional[VerifiedRecord]]:
    """
    Close the pending request of user_id. Approval also writes the VerifiedRecord.
    Exactly one of several concurrent resolutions succeeds, the rest see NotFoundError.
    """
    r = get_redis()

    def _tx(pipe: Pipeline):
        data = pipe.hgetall(_request(user_id))
        if not data:
            raise NotFoundError("No pending verification request for this user.")
        req = VerificationRequest.from_hash(data)
        req.status = APPROVED if approve else REJECTED
        record = None
        pipe.multi()
        pipe.delete(_request(user_id))
        pipe.zrem(_pending(), user_id)
        if approve:
            record = VerifiedRecord(user=user_id, verified_at=now_ms(), approved_by=admin_id)
            pipe.hset(_record(user_id), mapping=record.to_hash())
            pipe.zadd(_verified(), {user_id: record.verified_at})
        return req, record

    return r.transaction(_tx, _request(user_id), value_from_callable=True)


def is_verified(user_id: str) -> bool:
    r = get_redis()
    return bool(r.exists(_record(user_id)))


def get_record(user_id: str) -> Optional[VerifiedRecord]:
    r = get_redis()
    data = r.hgetall(_record(user_id))
    return VerifiedRecord.from_hash(data) if data else None


def delete_record(user_id: str) -> VerifiedRecord:
    r = get_redis()

    def _tx(pipe: Pipeline) -> VerifiedRecord:
        data = pipe.hgetall(_record(user_id))
        if not data:
            raise NotFoundError("User is not verified.")
        pipe.multi()
        pipe.delete(_record(user_id))
        pipe.zrem(_verified(), user_id)
        return VerifiedRecord.from_hash(data)

    return r.transaction(_tx, _record(user_id), value_from_callable=True)


def page_verified(offset: int, limit: int) -> Tuple[List[VerifiedRecord], int]:
    r = get_redis()
    user_ids = r.zrange(_verified(), offset, offset + limit - 1)
    total = r.zcard(_verified())
    records = [rec for rec in (get_record(uid) for uid in user_ids) if rec is not None]
    return records, int(total)


def page_pending(offset: int, limit: int) -> Tuple[List[VerificationRequest], int]:
    r = get_redis()
    user_ids = r.zrange(_pending(), offset, offset + limit - 1)
    total = r.zcard(_pending())
    requests = [req for req in (get_request(uid) for uid in user_ids) if req is not None]
    return requests, int(total)


def purge_user(user_id: str) -> None:
    """Forget any pending request and verified record of a deleted account."""
    r = get_redis()
    pipe = r.pipeline(transaction=True)
    pipe.delete(_request(user_id), _record(user_id))
    pipe.zrem(_pending(), user_id)
    pipe.zrem(_verified(), user_id)
    pipe.execute()
