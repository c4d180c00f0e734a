"""Group membership and ownership over HTTP."""

import pytest

API = "/api/v1/groups"


@pytest.fixture
def carol(make_user, auth_headers):
    return auth_headers(make_user("carol"))


@pytest.fixture
def dave(make_user, auth_headers):
    return auth_headers(make_user("dave"))


@pytest.fixture
def hikers(client, carol):
    response = client.post(API, json={"name": "Hikers"}, headers=carol)
    assert response.status_code == 201
    return response.json()["id"]


def test_transfer_then_previous_owner_leaves(client, carol, dave, hikers):
    response = client.post(f"{API}/{hikers}/members", json={"username": "dave"}, headers=carol)
    assert response.status_code == 200
    assert sorted(response.json()["members"]) == ["carol", "dave"]

    response = client.put(f"{API}/{hikers}/owner", json={"username": "dave"}, headers=carol)
    assert response.status_code == 200
    assert response.json()["owner"] == "dave"

    response = client.delete(f"{API}/{hikers}/members/carol", headers=carol)
    assert response.status_code == 200
    assert response.json()["members"] == ["dave"]

    response = client.delete(f"{API}/{hikers}/members/dave", headers=dave)
    assert response.status_code == 403


def test_group_info(client, carol, hikers):
    info = client.get(f"{API}/{hikers}", headers=carol).json()

    assert info["name"] == "Hikers"
    assert info["owner"] == "carol"
    assert info["members"] == ["carol"]
    assert [g["name"] for g in client.get(API, headers=carol).json()] == ["Hikers"]


def test_unknown_group_is_not_found(client, carol):
    assert client.get(f"{API}/missing", headers=carol).status_code == 404


def test_empty_name_is_bad_request(client, carol):
    assert client.post(API, json={"name": " "}, headers=carol).status_code == 400


def test_outsider_cannot_add_members(client, make_user, dave, hikers):
    make_user("erin")
    response = client.post(f"{API}/{hikers}/members", json={"username": "erin"}, headers=dave)
    assert response.status_code == 403


def test_transfer_to_non_member_is_forbidden(client, carol, dave, hikers):
    response = client.put(f"{API}/{hikers}/owner", json={"username": "dave"}, headers=carol)
    assert response.status_code == 403


def test_rename_and_delete(client, carol, dave, hikers):
    response = client.patch(f"{API}/{hikers}", json={"name": "Trail Runners"}, headers=carol)
    assert response.json()["name"] == "Trail Runners"

    client.post(f"{API}/{hikers}/members", json={"username": "dave"}, headers=carol)
    assert client.delete(f"{API}/{hikers}", headers=dave).status_code == 403
    assert client.delete(f"{API}/{hikers}", headers=carol).status_code == 200
    assert client.get(f"{API}/{hikers}", headers=carol).status_code == 404


def test_outsider_cannot_read_roster(client, make_user, auth_headers, hikers):
    eve = auth_headers(make_user("eve"))

    response = client.get(f"{API}/{hikers}", headers=eve)

    assert response.status_code == 403
    assert "carol" not in response.text


def test_group_feed_is_paginated(client, carol, hikers):
    for i in range(3):
        client.post("/api/v1/posts", json={"content": f"post {i}"}, headers=carol)

    page = client.get(f"{API}/{hikers}/posts", params={"limit": 2}, headers=carol).json()
    rest = client.get(f"{API}/{hikers}/posts", params={"skip": 2, "limit": 2}, headers=carol).json()

    assert len(page) == 2
    assert len(rest) == 1
    assert {p["content"] for p in page + rest} == {"post 0", "post 1", "post 2"}
