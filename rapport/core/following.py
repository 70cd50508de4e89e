"""
Relationship Graph: follow requests and follow edges.

Per ordered pair (A, B):

    none --send_request--> requested(A->B) --accept_request--> edge(A->B)
                                  |
                                  +--reject_request / remove_request--> none

Requests and edges are separate records: a request disappears when resolved,
an edge persists until either side removes it. Ownership is derived from the
acting user: only B accepts or rejects A's request, only A cancels it.
"""
from typing import List

from rapport.core.context import Actor
from rapport.core.errors import ValidationError
from rapport.observability import metrics
from rapport.observability.logging import log
from rapport.store import follow_repo
from rapport.store.models import FollowEdge, FollowRequest


def send_request(actor: Actor, to_user: str) -> FollowRequest:
    from_user = actor.user_id
    if from_user == to_user:
        raise ValidationError("Cannot send a follow request to yourself.")
    req = follow_repo.create_request(from_user, to_user)
    log(event="follow_request_sent", fromUser=from_user, toUser=to_user)
    metrics.increment("follow_request_sent")
    return req


def accept_request(actor: Actor, from_user: str) -> FollowEdge:
    edge = follow_repo.convert_request(from_user, actor.user_id)
    log(event="follow_request_accepted", fromUser=from_user, toUser=actor.user_id)
    metrics.increment("follow_request_accepted")
    return edge


def reject_request(actor: Actor, from_user: str) -> FollowRequest:
    req = follow_repo.delete_request(from_user, actor.user_id)
    log(event="follow_request_rejected", fromUser=from_user, toUser=actor.user_id)
    metrics.increment("follow_request_rejected")
    return req


def remove_request(actor: Actor, to_user: str) -> FollowRequest:
    req = follow_repo.delete_request(actor.user_id, to_user)
    log(event="follow_request_cancelled", fromUser=actor.user_id, toUser=to_user)
    metrics.increment("follow_request_cancelled")
    return req


def remove_follower(actor: Actor, other: str) -> FollowEdge:
    """Drop other's edge towards the actor."""
    edge = follow_repo.delete_edge(other, actor.user_id)
    log(event="follower_removed", user=actor.user_id, follower=other)
    metrics.increment("follow_edge_removed")
    return edge


def remove_following(actor: Actor, other: str) -> FollowEdge:
    """Unfollow: drop the actor's edge towards other."""
    edge = follow_repo.delete_edge(actor.user_id, other)
    log(event="following_removed", user=actor.user_id, followee=other)
    metrics.increment("follow_edge_removed")
    return edge


def get_followers(user_id: str) -> List[str]:
    return follow_repo.list_followers(user_id)


def get_following(user_id: str) -> List[str]:
    return follow_repo.list_following(user_id)


def get_requests(user_id: str) -> List[FollowRequest]:
    return follow_repo.list_incoming(user_id)


def get_sent_requests(user_id: str) -> List[FollowRequest]:
    return follow_repo.list_outgoing(user_id)


def is_following(follower: str, followee: str) -> bool:
    return follow_repo.edge_exists(follower, followee)
