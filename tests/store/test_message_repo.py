from concurrent.futures import ThreadPoolExecutor

from rapport.store import message_repo
from rapport.store.redis_conn import key


def test_ids_are_monotonic_and_returned_at_send(fake_redis):
    first = message_repo.append("a", "b", "one")
    second = message_repo.append("b", "a", "two")
    assert second.id == first.id + 1
    assert message_repo.get(first.id).content == "one"


def test_delete_clears_every_index(fake_redis):
    msg = message_repo.append("a", "b", "bye")
    message_repo.delete(msg.id)

    assert message_repo.get(msg.id) is None
    assert message_repo.list_between("a", "b") == []
    assert message_repo.list_for_user("a") == []
    assert message_repo.list_for_user("b") == []
    assert message_repo.find_ids("a", "b", msg.timestamp) == []
    assert fake_redis.exists(key("message", msg.id)) == 0


def test_find_ids_is_direction_sensitive(fake_redis):
    msg = message_repo.append("a", "b", "x")
    assert message_repo.find_ids("a", "b", msg.timestamp) == [msg.id]
    assert message_repo.find_ids("b", "a", msg.timestamp) == []


def test_timestamps_follow_id_order_when_clock_steps_back(fake_redis, monkeypatch):
    clock = iter([2_000, 1_000, 3_000])
    monkeypatch.setattr(message_repo, "now_ms", lambda: next(clock))

    sent = [message_repo.append("a", "b", str(i)) for i in range(3)]

    assert [m.id for m in sent] == sorted(m.id for m in sent)
    assert [m.timestamp for m in sent] == [2_000, 2_000, 3_000]
    assert [m.id for m in message_repo.list_between("a", "b")] == [m.id for m in sent]


def test_concurrent_sends_keep_ids_and_timestamps_aligned(fake_redis):
    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(lambda i: message_repo.append("a", "b", str(i)), range(40)))

    thread = message_repo.list_between("a", "b")
    assert [m.id for m in thread] == list(range(1, 41))
    stamps = [m.timestamp for m in thread]
    assert stamps == sorted(stamps)
