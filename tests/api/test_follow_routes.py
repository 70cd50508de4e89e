def test_alice_and_bob_scenario(client, signup):
    alice = signup("alice")
    bob = signup("bob")

    res = client.post("/follow/requests/bob", headers=alice)
    assert res.status_code == 200
    assert res.json()["request"]["from"] == "alice"

    inbox = client.get("/follow/requests", headers=bob).json()
    assert [(r["from"], r["to"], r["status"]) for r in inbox] == [("alice", "bob", "pending")]

    assert client.put("/follow/accept/alice", headers=bob).status_code == 200

    assert client.get("/follow/followers", headers=bob).json() == ["alice"]
    assert client.get("/follow/following", headers=alice).json() == ["bob"]
    assert client.get("/follow/requests", headers=bob).json() == []


def test_duplicate_request_is_409(client, signup):
    alice = signup("alice")
    signup("bob")
    assert client.post("/follow/requests/bob", headers=alice).status_code == 200

    res = client.post("/follow/requests/bob", headers=alice)
    assert res.status_code == 409
    assert res.json()["error"] == "conflict"


def test_self_request_is_400(client, signup):
    alice = signup("alice")
    res = client.post("/follow/requests/alice", headers=alice)
    assert res.status_code == 400
    assert res.json()["status"] == "error"


def test_unknown_counterparty_is_404(client, signup):
    alice = signup("alice")
    assert client.post("/follow/requests/ghost", headers=alice).status_code == 404


def test_reject_and_cancel(client, signup):
    alice = signup("alice")
    bob = signup("bob")

    client.post("/follow/requests/bob", headers=alice)
    assert client.put("/follow/reject/alice", headers=bob).status_code == 200
    assert client.put("/follow/reject/alice", headers=bob).status_code == 404

    client.post("/follow/requests/bob", headers=alice)
    sent = client.get("/follow/requests/sent", headers=alice).json()
    assert [(r["from"], r["to"]) for r in sent] == [("alice", "bob")]
    assert client.delete("/follow/requests/bob", headers=alice).status_code == 200
    assert client.put("/follow/accept/alice", headers=bob).status_code == 404


def test_remove_edges(client, signup):
    alice = signup("alice")
    bob = signup("bob")
    client.post("/follow/requests/bob", headers=alice)
    client.put("/follow/accept/alice", headers=bob)

    assert client.delete("/follow/follower/alice", headers=bob).status_code == 200
    assert client.get("/follow/following", headers=alice).json() == []
    assert client.delete("/follow/following/bob", headers=alice).status_code == 404


def test_follow_routes_require_login(client):
    assert client.get("/follow/followers").status_code == 401
    assert client.post("/follow/requests/bob").status_code == 401
