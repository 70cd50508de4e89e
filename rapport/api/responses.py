"""
Render core records for the API: stored ids become usernames here and nowhere else.
"""
from typing import List

from rapport.core import identity
from rapport.core.verifying import Page
from rapport.store.models import FollowRequest, Message, VerificationRequest, VerifiedRecord
from rapport.utils.time import format_timestamp_ms


def usernames(ids: List[str]) -> List[str]:
    return identity.ids_to_usernames(ids)


def follow_requests(requests: List[FollowRequest]) -> List[dict]:
    ids = [r.from_user for r in requests] + [r.to_user for r in requests]
    names = dict(zip(ids, identity.ids_to_usernames(ids)))
    return [
        {"from": names[r.from_user], "to": names[r.to_user], "status": r.status, "createdAt": r.created_at}
        for r in requests
    ]


def messages(items: List[Message]) -> List[dict]:
    ids = [m.sender for m in items] + [m.recipient for m in items]
    names = dict(zip(ids, identity.ids_to_usernames(ids)))
    return [
        {
            "id": m.id,
            "sender": names[m.sender],
            "recipient": names[m.recipient],
            "content": m.content,
            "timestamp": format_timestamp_ms(m.timestamp),
            "timestampMs": m.timestamp,
        }
        for m in items
    ]


def message(m: Message) -> dict:
    return messages([m])[0]


def verification_request(req: VerificationRequest) -> dict:
    return {
        "user": usernames([req.user])[0],
        "credentials": req.credentials,
        "status": req.status,
        "createdAt": req.created_at,
    }


def verification_requests(page: Page[VerificationRequest]) -> dict:
    names = usernames([req.user for req in page.items])
    return {
        "items": [
            {"user": name, "credentials": req.credentials, "status": req.status, "createdAt": req.created_at}
            for name, req in zip(names, page.items)
        ],
        "offset": page.offset,
        "limit": page.limit,
        "total": page.total,
    }


def verified_users(page: Page[VerifiedRecord]) -> dict:
    ids = [rec.user for rec in page.items]
    approvers = [rec.approved_by for rec in page.items if rec.approved_by]
    names = dict(zip(ids + approvers, usernames(ids + approvers)))
    return {
        "items": [
            {
                "user": names[rec.user],
                "verifiedAt": rec.verified_at,
                "approvedBy": names.get(rec.approved_by) if rec.approved_by else None,
            }
            for rec in page.items
        ],
        "offset": page.offset,
        "limit": page.limit,
        "total": page.total,
    }
