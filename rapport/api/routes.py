"""
Web routes. Each handler resolves usernames to ids, makes exactly one core call
and renders the result; the ROUTES table at the bottom is the whole HTTP surface.
"""
from typing import List, Optional

from fastapi import Depends

from rapport.api import responses
from rapport.api.auth import require_session, session_token
from rapport.api.router import ADMIN, LOGGED_IN, LOGGED_OUT, PUBLIC, Route
from rapport.api.schemas import (
    CreateUserBody,
    FollowRequestOut,
    LoginBody,
    MessageOut,
    RequestPage,
    SendMessageBody,
    UpdatePasswordBody,
    UpdateUsernameBody,
    VerificationRequestBody,
    VerifiedPage,
)
from rapport.core import following, identity, messaging, sessioning, verifying
from rapport.core.context import Actor
from rapport.core.errors import ValidationError
from rapport.utils.time import parse_timestamp_ms


# ---------------------------------------------------------------------------
# Identity + session
# ---------------------------------------------------------------------------
def get_session_user(actor: Actor = Depends(require_session)):
    return identity.get_user_by_id(actor.user_id).public()


def get_users():
    return [u.public() for u in identity.get_users()]


def get_user(username: str):
    return identity.get_user_by_username(username).public()


def create_user(body: CreateUserBody):
    user = identity.create_user(body.username, body.password, body.adminKey)
    return {"msg": "Created user successfully!", "user": user.public()}


def update_username(body: UpdateUsernameBody, actor: Actor = Depends(require_session)):
    user = identity.update_username(actor.user_id, body.username)
    return {"msg": "Updated username successfully!", "user": user.public()}


def update_password(body: UpdatePasswordBody, actor: Actor = Depends(require_session)):
    identity.update_password(actor.user_id, body.currentPassword, body.newPassword)
    return {"msg": "Updated password successfully!"}


def delete_user(actor: Actor = Depends(require_session), token: str = Depends(session_token)):
    sessioning.end(token)
    identity.delete_user(actor.user_id)
    return {"msg": "You deleted your account"}


def log_in(body: LoginBody):
    user = identity.authenticate(body.username, body.password)
    token = sessioning.start(user.id)
    return {"msg": "Logged in!", "token": token}


def log_out(token: str = Depends(session_token)):
    sessioning.end(token)
    return {"msg": "Logged out!"}


# ---------------------------------------------------------------------------
# Relationship Graph
# ---------------------------------------------------------------------------
def get_followers(actor: Actor = Depends(require_session)) -> List[str]:
    return responses.usernames(following.get_followers(actor.user_id))


def get_following(actor: Actor = Depends(require_session)) -> List[str]:
    return responses.usernames(following.get_following(actor.user_id))


def remove_follower(follower: str, actor: Actor = Depends(require_session)):
    following.remove_follower(actor, identity.resolve_id(follower))
    return {"msg": f"{follower} no longer follows you."}


def remove_following(followee: str, actor: Actor = Depends(require_session)):
    following.remove_following(actor, identity.resolve_id(followee))
    return {"msg": f"You no longer follow {followee}."}


def get_requests(actor: Actor = Depends(require_session)):
    return responses.follow_requests(following.get_requests(actor.user_id))


def get_sent_requests(actor: Actor = Depends(require_session)):
    return responses.follow_requests(following.get_sent_requests(actor.user_id))


def send_follow_request(to: str, actor: Actor = Depends(require_session)):
    req = following.send_request(actor, identity.resolve_id(to))
    return {"msg": "Sent request!", "request": responses.follow_requests([req])[0]}


def remove_follow_request(to: str, actor: Actor = Depends(require_session)):
    following.remove_request(actor, identity.resolve_id(to))
    return {"msg": "Removed request!"}


def accept_follow_request(requester: str, actor: Actor = Depends(require_session)):
    following.accept_request(actor, identity.resolve_id(requester))
    return {"msg": "Accepted request!"}


def reject_follow_request(requester: str, actor: Actor = Depends(require_session)):
    following.reject_request(actor, identity.resolve_id(requester))
    return {"msg": "Rejected request!"}


# ---------------------------------------------------------------------------
# Verification Workflow
# ---------------------------------------------------------------------------
def create_verification_request(body: VerificationRequestBody, actor: Actor = Depends(require_session)):
    req = verifying.create_verification_request(actor, body.credentials)
    return {"msg": "Verification request created!", "request": responses.verification_request(req)}


def get_verification_status(username: str):
    verified = verifying.is_verified(identity.resolve_id(username))
    return {"status": "User is verified." if verified else "User is not verified.", "verified": verified}


def view_verified(offset: Optional[int] = None, limit: Optional[int] = None, actor: Actor = Depends(require_session)):
    return responses.verified_users(verifying.get_all_verified(actor, offset, limit))


def view_own_request(actor: Actor = Depends(require_session)):
    req = verifying.get_request_by_user(actor.user_id)
    return {"request": responses.verification_request(req) if req else None}


def view_all_requests(offset: Optional[int] = None, limit: Optional[int] = None, actor: Actor = Depends(require_session)):
    return responses.verification_requests(verifying.get_all_requests(actor, offset, limit))


def approve_verification_request(requester: str, actor: Actor = Depends(require_session)):
    req = verifying.approve_request(actor, identity.resolve_id(requester))
    return {"msg": "Approved verification request!", "request": responses.verification_request(req)}


def reject_verification_request(requester: str, actor: Actor = Depends(require_session)):
    req = verifying.reject_request(actor, identity.resolve_id(requester))
    return {"msg": "Rejected verification request!", "request": responses.verification_request(req)}


def delete_verified_user(username: str, actor: Actor = Depends(require_session)):
    verifying.delete_verified(actor, identity.resolve_id(username))
    return {"msg": f"Removed verification from {username}."}


# ---------------------------------------------------------------------------
# Messaging Log
# ---------------------------------------------------------------------------
def view_messages(actor: Actor = Depends(require_session)):
    return responses.messages(messaging.get_messages_for_user(actor.user_id))


def view_messages_with(friend: str, actor: Actor = Depends(require_session)):
    return responses.messages(messaging.get_messages_between_users(actor.user_id, identity.resolve_id(friend)))


def send_message(body: SendMessageBody, actor: Actor = Depends(require_session)):
    msg = messaging.send_message(actor, identity.resolve_id(body.recipient), body.content)
    return {"msg": "Message sent!", "message": responses.message(msg)}


def delete_message_by_time(recipient: str, time: str, actor: Actor = Depends(require_session)):
    try:
        ts = parse_timestamp_ms(time)
    except ValueError as e:
        raise ValidationError(f"Invalid time: {e}") from e
    message_id = messaging.locate_message(actor, identity.resolve_id(recipient), ts)
    messaging.delete_message(actor, message_id)
    return {"msg": "Message deleted!", "id": message_id}


def delete_message(message_id: int, actor: Actor = Depends(require_session)):
    messaging.delete_message(actor, message_id)
    return {"msg": "Message deleted!", "id": message_id}


ROUTES = [
    Route("GET", "/session", get_session_user, LOGGED_IN, tags=("users",)),
    Route("GET", "/users", get_users, PUBLIC, tags=("users",)),
    Route("GET", "/users/{username}", get_user, PUBLIC, tags=("users",)),
    Route("POST", "/users", create_user, LOGGED_OUT, tags=("users",)),
    Route("PATCH", "/users/username", update_username, LOGGED_IN, tags=("users",)),
    Route("PATCH", "/users/password", update_password, LOGGED_IN, tags=("users",)),
    Route("DELETE", "/users", delete_user, LOGGED_IN, tags=("users",)),
    Route("POST", "/login", log_in, LOGGED_OUT, tags=("session",)),
    Route("POST", "/logout", log_out, LOGGED_IN, tags=("session",)),

    Route("GET", "/follow/followers", get_followers, LOGGED_IN, List[str], tags=("follow",)),
    Route("GET", "/follow/following", get_following, LOGGED_IN, List[str], tags=("follow",)),
    Route("DELETE", "/follow/follower/{follower}", remove_follower, LOGGED_IN, tags=("follow",)),
    Route("DELETE", "/follow/following/{followee}", remove_following, LOGGED_IN, tags=("follow",)),
    Route("GET", "/follow/requests", get_requests, LOGGED_IN, List[FollowRequestOut], tags=("follow",)),
    Route("GET", "/follow/requests/sent", get_sent_requests, LOGGED_IN, List[FollowRequestOut], tags=("follow",)),
    Route("POST", "/follow/requests/{to}", send_follow_request, LOGGED_IN, tags=("follow",)),
    Route("DELETE", "/follow/requests/{to}", remove_follow_request, LOGGED_IN, tags=("follow",)),
    Route("PUT", "/follow/accept/{requester}", accept_follow_request, LOGGED_IN, tags=("follow",)),
    Route("PUT", "/follow/reject/{requester}", reject_follow_request, LOGGED_IN, tags=("follow",)),

    Route("POST", "/verification/request", create_verification_request, LOGGED_IN, tags=("verification",)),
    Route("GET", "/verification/status", get_verification_status, PUBLIC, tags=("verification",)),
    Route("GET", "/verification/view", view_verified, ADMIN, VerifiedPage, tags=("verification",)),
    Route("GET", "/verification/requests/view", view_own_request, LOGGED_IN, tags=("verification",)),
    Route("GET", "/verification/requests/viewall", view_all_requests, ADMIN, RequestPage, tags=("verification",)),
    Route("POST", "/verification/approve/{requester}", approve_verification_request, ADMIN, tags=("verification",)),
    Route("DELETE", "/verification/reject/{requester}", reject_verification_request, ADMIN, tags=("verification",)),
    Route("DELETE", "/verification/delete", delete_verified_user, ADMIN, tags=("verification",)),

    Route("GET", "/messages", view_messages, LOGGED_IN, List[MessageOut], tags=("messages",)),
    Route("GET", "/messages/{friend}", view_messages_with, LOGGED_IN, List[MessageOut], tags=("messages",)),
    Route("POST", "/messages/send", send_message, LOGGED_IN, tags=("messages",)),
    # Registered before /messages/{message_id} so "delete" is not parsed as an id
    Route("DELETE", "/messages/delete", delete_message_by_time, LOGGED_IN, tags=("messages",)),
    Route("DELETE", "/messages/{message_id}", delete_message, LOGGED_IN, tags=("messages",)),
]
