from rapport.settings import settings


def test_login_logout_cycle(client, signup):
    alice = signup("alice")
    me = client.get("/session", headers=alice).json()
    assert me["username"] == "alice"
    assert "password_hash" not in me and "passwordHash" not in me

    assert client.post("/logout", headers=alice).status_code == 200
    assert client.get("/session", headers=alice).status_code == 401


def test_logged_in_user_cannot_sign_up_or_log_in(client, signup):
    alice = signup("alice")
    assert client.post("/users", json={"username": "x", "password": "pw"}, headers=alice).status_code == 403
    assert client.post("/login", json={"username": "alice", "password": "pw"}, headers=alice).status_code == 403


def test_bad_credentials(client, signup):
    signup("alice")
    res = client.post("/login", json={"username": "alice", "password": "nope"})
    assert res.status_code == 401
    assert res.json()["error"] == "unauthorized"


def test_rename_keeps_follow_graph(client, signup):
    alice = signup("alice")
    bob = signup("bob")
    client.post("/follow/requests/bob", headers=alice)
    client.put("/follow/accept/alice", headers=bob)

    assert client.patch("/users/username", json={"username": "alicia"}, headers=alice).status_code == 200
    assert client.get("/follow/followers", headers=bob).json() == ["alicia"]
    assert client.get("/users/alice").status_code == 404
    assert client.get("/users/alicia").json()["username"] == "alicia"


def test_delete_account(client, signup):
    alice = signup("alice")
    assert client.delete("/users", headers=alice).status_code == 200
    assert client.get("/session", headers=alice).status_code == 401
    assert client.post("/login", json={"username": "alice", "password": "pw"}).status_code == 401


def test_update_password(client, signup):
    alice = signup("alice")
    body = {"currentPassword": "pw", "newPassword": "pw2"}
    assert client.patch("/users/password", json=body, headers=alice).status_code == 200
    assert client.post("/login", json={"username": "alice", "password": "pw2"}).status_code == 200


def test_api_key_gate(client, monkeypatch):
    monkeypatch.setattr(settings, "API_KEY", "k")
    assert client.get("/users").status_code == 401
    assert client.get("/users", headers={"x-api-key": "k"}).status_code == 200


def test_admin_metrics(client, signup):
    alice = signup("alice")
    root = signup("root", admin=True)
    client.post("/follow/requests/root", headers=alice)

    assert client.get("/admin/metrics", headers=alice).status_code == 403
    snap = client.get("/admin/metrics", headers=root).json()
    assert snap["events"]["follow_request_sent"] == 1
    assert snap["errors"]["forbidden"] == 1
    assert snap["samples"] >= 1


def test_deleted_accounts_leave_no_dangling_relations(client, signup):
    bob = signup("bob")
    carol = signup("carol")
    dave = signup("dave")
    client.post("/follow/requests/bob", headers=carol)
    client.put("/follow/accept/carol", headers=bob)
    client.post("/follow/requests/bob", headers=dave)

    assert client.delete("/users", headers=carol).status_code == 200
    assert client.delete("/users", headers=dave).status_code == 200

    assert client.get("/follow/followers", headers=bob).json() == []
    assert client.get("/follow/requests", headers=bob).json() == []


def test_placeholder_username_cannot_be_claimed(client, signup):
    res = client.post("/users", json={"username": "DELETED_USER", "password": "pw"})
    assert res.status_code == 400
    alice = signup("alice")
    res = client.patch("/users/username", json={"username": "DELETED_USER"}, headers=alice)
    assert res.status_code == 400
