import pytest

from rapport.core import following
from rapport.core.errors import ConflictError, NotFoundError, ValidationError


def test_accept_turns_request_into_edge(alice, bob):
    following.send_request(alice, bob.user_id)
    edge = following.accept_request(bob, alice.user_id)

    assert edge.follower == alice.user_id
    assert edge.followee == bob.user_id
    assert following.is_following(alice.user_id, bob.user_id)
    assert following.get_requests(bob.user_id) == []
    assert following.get_sent_requests(alice.user_id) == []


def test_edge_is_directed(alice, bob):
    following.send_request(alice, bob.user_id)
    following.accept_request(bob, alice.user_id)

    assert not following.is_following(bob.user_id, alice.user_id)
    assert following.get_followers(alice.user_id) == []
    assert following.get_following(bob.user_id) == []


def test_reject_leaves_no_edge_and_no_request(alice, bob):
    following.send_request(alice, bob.user_id)
    following.reject_request(bob, alice.user_id)

    assert not following.is_following(alice.user_id, bob.user_id)
    assert following.get_requests(bob.user_id) == []
    assert following.get_sent_requests(alice.user_id) == []


def test_accept_or_reject_missing_request_is_not_found(alice, bob):
    with pytest.raises(NotFoundError):
        following.accept_request(bob, alice.user_id)
    with pytest.raises(NotFoundError):
        following.reject_request(bob, alice.user_id)


def test_only_target_can_accept(alice, bob):
    following.send_request(alice, bob.user_id)
    # alice "accepting" looks for a request bob -> alice, which does not exist
    with pytest.raises(NotFoundError):
        following.accept_request(alice, bob.user_id)
    assert len(following.get_requests(bob.user_id)) == 1


def test_duplicate_request_conflicts_and_keeps_one(alice, bob):
    following.send_request(alice, bob.user_id)
    with pytest.raises(ConflictError):
        following.send_request(alice, bob.user_id)

    pending = following.get_requests(bob.user_id)
    assert [(r.from_user, r.to_user) for r in pending] == [(alice.user_id, bob.user_id)]


def test_self_request_is_rejected(alice):
    with pytest.raises(ValidationError):
        following.send_request(alice, alice.user_id)
    assert following.get_requests(alice.user_id) == []


def test_request_while_already_following_conflicts(alice, bob):
    following.send_request(alice, bob.user_id)
    following.accept_request(bob, alice.user_id)
    with pytest.raises(ConflictError):
        following.send_request(alice, bob.user_id)


def test_reciprocal_requests_resolve_independently(alice, bob):
    following.send_request(alice, bob.user_id)
    following.send_request(bob, alice.user_id)

    following.accept_request(bob, alice.user_id)
    following.accept_request(alice, bob.user_id)

    assert following.is_following(alice.user_id, bob.user_id)
    assert following.is_following(bob.user_id, alice.user_id)


def test_cancel_own_request(alice, bob):
    following.send_request(alice, bob.user_id)
    following.remove_request(alice, bob.user_id)

    assert following.get_requests(bob.user_id) == []
    with pytest.raises(NotFoundError):
        following.remove_request(alice, bob.user_id)
    with pytest.raises(NotFoundError):
        following.accept_request(bob, alice.user_id)


def test_remove_follower_and_following(alice, bob, carol):
    for requester in (alice, carol):
        following.send_request(requester, bob.user_id)
        following.accept_request(bob, requester.user_id)

    following.remove_follower(bob, alice.user_id)
    assert following.get_followers(bob.user_id) == [carol.user_id]
    assert following.get_following(alice.user_id) == []

    following.remove_following(carol, bob.user_id)
    assert following.get_followers(bob.user_id) == []


def test_removing_absent_edge_is_not_found(alice, bob):
    with pytest.raises(NotFoundError):
        following.remove_follower(bob, alice.user_id)
    with pytest.raises(NotFoundError):
        following.remove_following(alice, bob.user_id)


def test_inbox_lists_only_incoming_requests(alice, bob, carol):
    following.send_request(alice, bob.user_id)
    following.send_request(carol, bob.user_id)
    following.send_request(bob, carol.user_id)

    incoming = following.get_requests(bob.user_id)
    assert {r.from_user for r in incoming} == {alice.user_id, carol.user_id}
    assert all(r.to_user == bob.user_id and r.status == "pending" for r in incoming)

    sent = following.get_sent_requests(bob.user_id)
    assert [(r.from_user, r.to_user) for r in sent] == [(bob.user_id, carol.user_id)]


def test_followers_have_no_duplicates(alice, bob):
    following.send_request(alice, bob.user_id)
    following.accept_request(bob, alice.user_id)
    following.remove_following(alice, bob.user_id)
    following.send_request(alice, bob.user_id)
    following.accept_request(bob, alice.user_id)

    assert following.get_followers(bob.user_id) == [alice.user_id]
