"""
Redis persistence for the message log.

Ids and timestamps are allocated together in one transaction on the sequence
key: the id is the next counter value and the timestamp never runs behind the
previous message, so id order is send order and timestamps ascend with it.
Indexes (all zsets scored by id unless noted):
  messages:thread:{lo}:{hi}            both directions between two users
  messages:user:{uid}                  everything a user sent or received
  messages:sent:{sender}:{recipient}   scored by timestamp, resolves the legacy
                                       (sender, recipient, timestamp) key
"""
from typing import List, Optional

from redis.client import Pipeline

from rapport.core.errors import NotFoundError
from rapport.store.models import Message
from rapport.store.redis_conn import get_redis, key
from rapport.utils.time import now_ms


def _seq() -> str:
    return key("messages", "seq")


def _clock() -> str:
    return key("messages", "clock")


def _message(message_id: int) -> str:
    return key("message", message_id)


def _thread(a: str, b: str) -> str:
    lo, hi = sorted((a, b))
    return key("messages", "thread", lo, hi)


def _user(user_id: str) -> str:
    return key("messages", "user", user_id)


def _sent(sender: str, recipient: str) -> str:
    return key("messages", "sent", sender, recipient)


def append(sender: str, recipient: str, content: str) -> Message:
    r = get_redis()

    def _tx(pipe: Pipeline) -> Message:
        last_id = int(pipe.get(_seq()) or 0)
        last_ts = int(pipe.get(_clock()) or 0)
        msg = Message(
            id=last_id + 1,
            sender=sender,
            recipient=recipient,
            content=content,
            timestamp=max(now_ms(), last_ts),
        )
        pipe.multi()
        pipe.set(_seq(), msg.id)
        pipe.set(_clock(), msg.timestamp)
        pipe.hset(_message(msg.id), mapping=msg.to_hash())
        pipe.zadd(_thread(sender, recipient), {msg.id: msg.id})
        pipe.zadd(_user(sender), {msg.id: msg.id})
        pipe.zadd(_user(recipient), {msg.id: msg.id})
        pipe.zadd(_sent(sender, recipient), {msg.id: msg.timestamp})
        return msg

    return r.transaction(_tx, _seq(), value_from_callable=True)


def get(message_id: int) -> Optional[Message]:
    r = get_redis()
    data = r.hgetall(_message(message_id))
    return Message.from_hash(data) if data else None


def _load_many(ids: List[str]) -> List[Message]:
    if not ids:
        return []
    r = get_redis()
    pipe = r.pipeline(transaction=False)
    for message_id in ids:
        pipe.hgetall(_message(message_id))
    return [Message.from_hash(data) for data in pipe.execute() if data]


def list_for_user(user_id: str) -> List[Message]:
    r = get_redis()
    return _load_many(r.zrange(_user(user_id), 0, -1))


def list_between(a: str, b: str) -> List[Message]:
    r = get_redis()
    return _load_many(r.zrange(_thread(a, b), 0, -1))


def find_ids(sender: str, recipient: str, timestamp: int) -> List[int]:
    r = get_redis()
    return [int(x) for x in r.zrangebyscore(_sent(sender, recipient), timestamp, timestamp)]


def delete(message_id: int, sender: Optional[str] = None) -> Message:
    """
    Delete one message from every index. With sender given, the stored sender
    must match or the message is left in place and NotFoundError is raised.
    """
    r = get_redis()

    def _tx(pipe: Pipeline) -> Message:
        data = pipe.hgetall(_message(message_id))
        if not data:
            raise NotFoundError("No such message.")
        msg = Message.from_hash(data)
        if sender is not None and msg.sender != sender:
            raise NotFoundError("No such message.")
        pipe.multi()
        pipe.delete(_message(message_id))
        pipe.zrem(_thread(msg.sender, msg.recipient), message_id)
        pipe.zrem(_user(msg.sender), message_id)
        pipe.zrem(_user(msg.recipient), message_id)
        pipe.zrem(_sent(msg.sender, msg.recipient), message_id)
        return msg

    return r.transaction(_tx, _message(message_id), value_from_callable=True)
