"""Listing endpoints only return what the caller may see."""

import pytest

API = "/api/v1"


@pytest.fixture
def users(client, make_user, auth_headers):
    """alice and bob are friends, carol is a stranger to both"""
    headers = {name: auth_headers(make_user(name)) for name in ("alice", "bob", "carol")}
    client.post(f"{API}/friends/requests/bob", headers=headers["alice"])
    client.put(f"{API}/friends/accept/alice", headers=headers["bob"])
    return headers


def _post(client, headers, content, **coords):
    response = client.post(f"{API}/posts", json={"content": content, **coords}, headers=headers)
    assert response.status_code == 201
    return response.json()["id"]


def test_posts_are_gated_by_friendship(client, users):
    for name in ("alice", "bob", "carol"):
        _post(client, users[name], f"from {name}")

    def contents(viewer):
        return {p["content"] for p in client.get(f"{API}/posts", headers=users[viewer]).json()}

    assert contents("alice") == {"from alice", "from bob"}
    assert contents("bob") == {"from alice", "from bob"}
    assert contents("carol") == {"from carol"}

    client.delete(f"{API}/friends/bob", headers=users["alice"])
    assert contents("alice") == {"from alice"}


def test_hidden_post_is_not_found(client, users):
    post_id = _post(client, users["carol"], "secret")

    assert client.get(f"{API}/posts/{post_id}", headers=users["alice"]).status_code == 404
    assert client.get(f"{API}/posts/{post_id}/comments", headers=users["alice"]).status_code == 404
    response = client.post(f"{API}/posts/{post_id}/comments", json={"content": "hi"}, headers=users["alice"])
    assert response.status_code == 404


def test_only_author_edits_post(client, users):
    post_id = _post(client, users["alice"], "draft")

    response = client.patch(f"{API}/posts/{post_id}", json={"content": "edited"}, headers=users["bob"])
    assert response.status_code == 403
    response = client.patch(f"{API}/posts/{post_id}", json={"content": "edited"}, headers=users["alice"])
    assert response.json()["content"] == "edited"


def test_delete_post_removes_comments(client, users):
    post_id = _post(client, users["alice"], "short lived")
    client.post(f"{API}/posts/{post_id}/comments", json={"content": "nice"}, headers=users["bob"])

    response = client.delete(f"{API}/posts/{post_id}", headers=users["alice"])

    assert response.status_code == 200
    assert response.json()["id"] == post_id
    assert client.get(f"{API}/posts/{post_id}", headers=users["alice"]).status_code == 404


def test_comments_on_own_post_are_gated(client, users):
    post_id = _post(client, users["bob"], "post")
    for name in ("alice", "bob"):
        response = client.post(f"{API}/posts/{post_id}/comments", json={"content": f"by {name}"}, headers=users[name])
        assert response.status_code == 201

    comments = client.get(f"{API}/posts/{post_id}/comments", headers=users["alice"]).json()
    assert {c["content"] for c in comments} == {"by alice", "by bob"}


def test_user_locations_are_gated(client, users):
    for name in ("alice", "carol"):
        response = client.post(f"{API}/locations/users", json={"latitude": "10", "longitude": "20"}, headers=users[name])
        assert response.status_code == 201

    assert len(client.get(f"{API}/locations/users", headers=users["bob"]).json()) == 1
    assert len(client.get(f"{API}/locations/users/filter/10/20", headers=users["carol"]).json()) == 1
    assert client.get(f"{API}/locations/users/carol", headers=users["alice"]).json() == []

    response = client.patch(f"{API}/locations/users", json={"latitude": "11"}, headers=users["alice"])
    assert response.json()["latitude"] == "11"


def test_post_locations_are_gated(client, users):
    alice_post = _post(client, users["alice"], "here", latitude="1", longitude="2")
    carol_post = _post(client, users["carol"], "there", latitude="1", longitude="2")

    located = client.get(f"{API}/locations/posts/filter/1/2", headers=users["bob"]).json()
    assert [l["target_id"] for l in located] == [alice_post]
    assert client.get(f"{API}/locations/posts/{carol_post}", headers=users["bob"]).status_code == 404


def test_tags_are_gated(client, users):
    post_id = _post(client, users["alice"], "trip report")
    response = client.post(f"{API}/tags", json={"item_id": post_id, "name": "trip"}, headers=users["alice"])
    assert response.status_code == 201

    assert len(client.get(f"{API}/tags/alice/trip", headers=users["bob"]).json()) == 1
    assert client.get(f"{API}/tags/alice/trip", headers=users["carol"]).json() == []
    response = client.post(f"{API}/tags", json={"item_id": post_id, "name": "trip"}, headers=users["carol"])
    assert response.status_code == 404


def test_group_feed_for_members_only(client, users):
    group_id = client.post(f"{API}/groups", json={"name": "Hikers"}, headers=users["carol"]).json()["id"]
    client.post(f"{API}/groups/{group_id}/members", json={"username": "alice"}, headers=users["carol"])
    _post(client, users["carol"], "from carol")
    _post(client, users["bob"], "from bob")

    feed = client.get(f"{API}/groups/{group_id}/posts", headers=users["alice"]).json()
    assert [p["content"] for p in feed] == ["from carol"]
    assert client.get(f"{API}/groups/{group_id}/posts", headers=users["bob"]).status_code == 403
