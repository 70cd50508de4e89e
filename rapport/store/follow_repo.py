"""
Redis persistence for the follow graph.

Pending requests are kept twice (inbox of the target, outbox of the requester)
and edges twice (followers of the followee, following of the follower) so each
view is one read. Every transition WATCHes the keys its precondition reads and
writes both copies inside one MULTI/EXEC, so a lost race retries and then sees
the winner's state.
"""
from typing import List

from redis.client import Pipeline

from rapport.core.errors import ConflictError, NotFoundError
from rapport.store.models import FollowEdge, FollowRequest
from rapport.store.redis_conn import get_redis, key
from rapport.utils.time import now_ms


def _inbox(user_id: str) -> str:
    return key("follow", "requests", "in", user_id)


def _outbox(user_id: str) -> str:
    return key("follow", "requests", "out", user_id)


def _followers(user_id: str) -> str:
    return key("follow", "followers", user_id)


def _following(user_id: str) -> str:
    return key("follow", "following", user_id)


def create_request(from_user: str, to_user: str) -> FollowRequest:
    r = get_redis()

    def _tx(pipe: Pipeline) -> FollowRequest:
        if pipe.zscore(_following(from_user), to_user) is not None:
            raise ConflictError("Already following this user.")
        if pipe.hexists(_inbox(to_user), from_user):
            raise ConflictError("Follow request already pending.")
        created = now_ms()
        pipe.multi()
        pipe.hset(_inbox(to_user), from_user, created)
        pipe.hset(_outbox(from_user), to_user, created)
        return FollowRequest(from_user=from_user, to_user=to_user, created_at=created)

    return r.transaction(_tx, _inbox(to_user), _following(from_user), value_from_callable=True)


def delete_request(from_user: str, to_user: str) -> FollowRequest:
    """Remove a pending request without creating an edge (reject or cancel)."""
    r = get_redis()

    def _tx(pipe: Pipeline) -> FollowRequest:
        created = pipe.hget(_inbox(to_user), from_user)
        if created is None:
            raise NotFoundError("No pending follow request.")
        pipe.multi()
        pipe.hdel(_inbox(to_user), from_user)
        pipe.hdel(_outbox(from_user), to_user)
        return FollowRequest(from_user=from_user, to_user=to_user, created_at=int(created))

    return r.transaction(_tx, _inbox(to_user), value_from_callable=True)


def convert_request(from_user: str, to_user: str) -> FollowEdge:
    """Replace the pending request (from -> to) with the edge (from -> to)."""
    r = get_redis()

    def _tx(pipe: Pipeline) -> FollowEdge:
        if not pipe.hexists(_inbox(to_user), from_user):
            raise NotFoundError("No pending follow request.")
        since = now_ms()
        pipe.multi()
        pipe.hdel(_inbox(to_user), from_user)
        pipe.hdel(_outbox(from_user), to_user)
        pipe.zadd(_followers(to_user), {from_user: since})
        pipe.zadd(_following(from_user), {to_user: since})
        return FollowEdge(follower=from_user, followee=to_user, since=since)

    return r.transaction(_tx, _inbox(to_user), value_from_callable=True)


def delete_edge(follower: str, followee: str) -> FollowEdge:
    r = get_redis()

    def _tx(pipe: Pipeline) -> FollowEdge:
        since = pipe.zscore(_followers(followee), follower)
        if since is None:
            raise NotFoundError("Not following this user.")
        pipe.multi()
        pipe.zrem(_followers(followee), follower)
        pipe.zrem(_following(follower), followee)
        return FollowEdge(follower=follower, followee=followee, since=int(since))

    return r.transaction(_tx, _followers(followee), value_from_callable=True)


def edge_exists(follower: str, followee: str) -> bool:
    r = get_redis()
    return r.zscore(_followers(followee), follower) is not None


def list_followers(user_id: str) -> List[str]:
    r = get_redis()
    return list(r.zrange(_followers(user_id), 0, -1))


def list_following(user_id: str) -> List[str]:
    r = get_redis()
    return list(r.zrange(_following(user_id), 0, -1))


def _sorted_requests(raw: dict, build) -> List[FollowRequest]:
    items = [build(other, int(created)) for other, created in (raw or {}).items()]
    return sorted(items, key=lambda fr: (fr.created_at, fr.from_user, fr.to_user))


def list_incoming(user_id: str) -> List[FollowRequest]:
    r = get_redis()
    return _sorted_requests(
        r.hgetall(_inbox(user_id)),
        lambda other, created: FollowRequest(from_user=other, to_user=user_id, created_at=created),
    )


def list_outgoing(user_id: str) -> List[FollowRequest]:
    r = get_redis()
    return _sorted_requests(
        r.hgetall(_outbox(user_id)),
        lambda other, created: FollowRequest(from_user=user_id, to_user=other, created_at=created),
    )


def purge_user(user_id: str) -> int:
    """
    Drop every request and edge that names user_id, on both sides.
    Returns how many relations were removed.
    """
    r = get_redis()
    own = (_inbox(user_id), _outbox(user_id), _followers(user_id), _following(user_id))

    def _tx(pipe: Pipeline) -> int:
        requesters = pipe.hkeys(_inbox(user_id))
        targets = pipe.hkeys(_outbox(user_id))
        followers = pipe.zrange(_followers(user_id), 0, -1)
        followees = pipe.zrange(_following(user_id), 0, -1)
        pipe.multi()
        for other in requesters:
            pipe.hdel(_outbox(other), user_id)
        for other in targets:
            pipe.hdel(_inbox(other), user_id)
        for other in followers:
            pipe.zrem(_following(other), user_id)
        for other in followees:
            pipe.zrem(_followers(other), user_id)
        pipe.delete(*own)
        return len(requesters) + len(targets) + len(followers) + len(followees)

    return r.transaction(_tx, *own, value_from_callable=True)
