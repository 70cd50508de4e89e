"""
Messaging Log: an append-only store of private messages addressed by user id.

Messages are never edited. Each one gets a store-assigned id at send time and
deletion goes through that id; the older (sender, recipient, timestamp)
addressing is still accepted through locate_message, which refuses to guess
when two messages share the same key.
"""
from typing import List

from rapport.core.context import Actor
from rapport.core.errors import ConflictError, ForbiddenError, NotFoundError
from rapport.observability import metrics
from rapport.observability.logging import log
from rapport.store import message_repo
from rapport.store.models import Message


def send_message(actor: Actor, recipient: str, content: str) -> Message:
    msg = message_repo.append(actor.user_id, recipient, content)
    log(event="message_sent", messageId=msg.id, sender=actor.user_id, recipient=recipient, content=content)
    metrics.increment("message_sent")
    return msg


def get_messages_for_user(user_id: str) -> List[Message]:
    return message_repo.list_for_user(user_id)


def get_messages_between_users(user_a: str, user_b: str) -> List[Message]:
    return message_repo.list_between(user_a, user_b)


def locate_message(actor: Actor, recipient: str, timestamp: int) -> int:
    ids = message_repo.find_ids(actor.user_id, recipient, timestamp)
    if not ids:
        raise NotFoundError("No such message.")
    if len(ids) > 1:
        raise ConflictError("More than one message matches; delete by message id.")
    return ids[0]


def delete_message(actor: Actor, message_id: int) -> Message:
    msg = message_repo.get(message_id)
    if msg is None:
        raise NotFoundError("No such message.")
    if msg.sender != actor.user_id:
        raise ForbiddenError("Only the sender can delete a message.")
    msg = message_repo.delete(message_id, sender=actor.user_id)
    log(event="message_deleted", messageId=message_id, sender=actor.user_id)
    metrics.increment("message_deleted")
    return msg
