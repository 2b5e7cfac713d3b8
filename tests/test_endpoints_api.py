"""
Tests for the notification endpoint HTTP routes.

The app runs with the in-memory service from conftest, so these cover
request parsing, status codes and response shape.
"""

from datetime import UTC, datetime

import pytest

ORG_ID = "50f7ba1150f7ba11"
BASE = "/api/v1/notification-endpoints"


async def _create_slack(client, name="hello", **extra):
    body = {"name": name, "type": "slack", "url": "http://example.com", "orgID": ORG_ID}
    body.update(extra)
    return await client.post(BASE, json=body)


# ─── Create ───────────────────────────────────────────────────────────


async def test_create_slack(test_client):
    resp = await _create_slack(test_client)

    assert resp.status_code == 201
    body = resp.json()
    assert body["id"] == "020f755c3c082000"
    assert body["orgID"] == ORG_ID
    assert body["status"] == "active"
    assert body["token"] == ""
    assert body["type"] == "slack"
    assert datetime.fromisoformat(body["createdAt"]) == datetime(2026, 1, 1, tzinfo=UTC)
    assert body["labels"] == []
    assert body["links"] == {
        "self": f"{BASE}/020f755c3c082000",
        "labels": f"{BASE}/020f755c3c082000/labels",
        "members": f"{BASE}/020f755c3c082000/members",
        "owners": f"{BASE}/020f755c3c082000/owners",
    }


async def test_create_http_redacts_secrets(test_client, secrets):
    resp = await test_client.post(
        BASE,
        json={
            "name": "webhook",
            "type": "http",
            "orgID": ORG_ID,
            "url": "http://example.com",
            "method": "POST",
            "authMethod": "basic",
            "username": "user1",
            "password": "password1",
        },
    )

    assert resp.status_code == 201
    body = resp.json()
    assert body["username"] == "secret: 020f755c3c082000-username"
    assert body["password"] == "secret: 020f755c3c082000-password"
    assert "password1" not in resp.text
    assert secrets.values["020f755c3c082000-password"] == "password1"


async def test_create_attaches_known_labels(test_client, labels):
    labels.add("1111111111111111", "prod")

    resp = await _create_slack(test_client, labels=["1111111111111111", "9999999999999999"])

    assert resp.status_code == 201
    assert resp.json()["labels"] == [
        {"id": "1111111111111111", "name": "prod", "properties": {}}
    ]


async def test_create_records_requesting_user(test_client, ownership):
    await _create_slack(test_client, name="mine")
    resp = await test_client.post(
        BASE,
        json={"name": "owned", "type": "slack", "url": "http://example.com", "orgID": ORG_ID},
        headers={"X-User-ID": "user-1"},
    )
    assert ownership.mappings == [(resp.json()["id"], "notificationEndpoints", "user-1")]


async def test_create_unknown_type(test_client):
    resp = await test_client.post(BASE, json={"name": "x", "type": "fax", "orgID": ORG_ID})
    assert resp.status_code == 400


async def test_create_invalid_body(test_client):
    resp = await test_client.post(BASE, content=b"{not json", headers={"Content-Type": "application/json"})
    assert resp.status_code == 400


async def test_create_missing_url(test_client, store):
    resp = await test_client.post(BASE, json={"name": "x", "type": "slack", "orgID": ORG_ID})
    assert resp.status_code == 400
    assert store.endpoints == {}


async def test_create_duplicate_name(test_client):
    await _create_slack(test_client)
    resp = await _create_slack(test_client)
    assert resp.status_code == 409


# ─── Read ─────────────────────────────────────────────────────────────


async def test_get_endpoint(test_client):
    await _create_slack(test_client)

    resp = await test_client.get(f"{BASE}/020f755c3c082000")

    assert resp.status_code == 200
    assert resp.json()["name"] == "hello"


async def test_get_missing(test_client):
    resp = await test_client.get(f"{BASE}/0000000000000000")
    assert resp.status_code == 404


async def test_list_paginates(test_client):
    for name in ("a", "b", "c"):
        await _create_slack(test_client, name=name)

    resp = await test_client.get(BASE, params={"orgID": ORG_ID, "page[size]": 2})

    assert resp.status_code == 200
    body = resp.json()
    assert [e["name"] for e in body["notificationEndpoints"]] == ["a", "b"]
    assert body["meta"] == {"has_next": True, "has_prev": False}
    assert set(body["links"]) == {"first", "next"}

    after = resp.json()["links"]["next"]
    resp = await test_client.get(after)
    body = resp.json()
    assert [e["name"] for e in body["notificationEndpoints"]] == ["c"]
    assert body["meta"]["has_next"] is False
    assert body["meta"]["has_prev"] is True


async def test_list_filters_by_user(test_client):
    await _create_slack(test_client, name="unowned")
    await test_client.post(
        BASE,
        json={"name": "owned", "type": "slack", "url": "http://example.com", "orgID": ORG_ID},
        headers={"X-User-ID": "user-1"},
    )

    resp = await test_client.get(BASE, params={"user": "user-1"})

    assert [e["name"] for e in resp.json()["notificationEndpoints"]] == ["owned"]


@pytest.mark.parametrize("size", ["abc", "0", "-5", "2.5"])
async def test_list_rejects_bad_page_size(test_client, size):
    resp = await test_client.get(BASE, params={"page[size]": size})
    assert resp.status_code == 400


async def test_list_caps_page_size(test_client):
    await _create_slack(test_client)

    resp = await test_client.get(BASE, params={"page[size]": 1000})

    assert resp.status_code == 200
    assert "page[size]=100" in resp.json()["links"]["first"]


async def test_list_rejects_bad_cursor(test_client):
    resp = await test_client.get(BASE, params={"page[after]": "!!not-a-cursor!!"})
    assert resp.status_code == 400


# ─── Update ───────────────────────────────────────────────────────────


async def test_patch_name(test_client):
    await _create_slack(test_client, description="ops alerts")

    resp = await test_client.patch(f"{BASE}/020f755c3c082000", json={"name": "renamed"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["name"] == "renamed"
    assert body["description"] == "ops alerts"
    assert body["url"] == "http://example.com"
    assert body["updatedAt"] != body["createdAt"]


async def test_patch_rejects_empty_name(test_client):
    await _create_slack(test_client)
    resp = await test_client.patch(f"{BASE}/020f755c3c082000", json={"name": ""})
    assert resp.status_code == 400


async def test_patch_rejects_overlong_name(test_client, store):
    await _create_slack(test_client)

    resp = await test_client.patch(f"{BASE}/020f755c3c082000", json={"name": "n" * 101})

    assert resp.status_code == 400
    assert store.endpoints["020f755c3c082000"].base.name == "hello"


async def test_patch_missing(test_client):
    resp = await test_client.patch(f"{BASE}/0000000000000000", json={"name": "x"})
    assert resp.status_code == 404


async def test_put_replaces_endpoint(test_client, secrets):
    await _create_slack(test_client, token="t0ken")
    fetched = (await test_client.get(f"{BASE}/020f755c3c082000")).json()
    assert fetched["token"] == "secret: 020f755c3c082000-token"

    fetched["url"] = "http://example.com/changed"
    resp = await test_client.put(f"{BASE}/020f755c3c082000", json=fetched)

    assert resp.status_code == 200
    body = resp.json()
    assert body["url"] == "http://example.com/changed"
    assert body["token"] == "secret: 020f755c3c082000-token"
    assert body["createdAt"] == fetched["createdAt"]
    assert secrets.values == {"020f755c3c082000-token": "t0ken"}


async def test_put_invalid(test_client):
    await _create_slack(test_client)
    resp = await test_client.put(
        f"{BASE}/020f755c3c082000", json={"type": "slack", "name": "hello", "url": ""}
    )
    assert resp.status_code == 400


async def test_put_missing(test_client):
    resp = await test_client.put(
        f"{BASE}/0000000000000000",
        json={"type": "slack", "name": "hello", "url": "http://example.com"},
    )
    assert resp.status_code == 404


# ─── Delete ───────────────────────────────────────────────────────────


async def test_delete_endpoint(test_client, store):
    await _create_slack(test_client)

    resp = await test_client.delete(f"{BASE}/020f755c3c082000")

    assert resp.status_code == 204
    assert store.endpoints == {}


async def test_delete_missing(test_client):
    resp = await test_client.delete(f"{BASE}/0000000000000000")
    assert resp.status_code == 404


# ─── Labels ───────────────────────────────────────────────────────────


async def test_label_routes(test_client, labels):
    labels.add("1111111111111111", "prod")
    await _create_slack(test_client)
    path = f"{BASE}/020f755c3c082000/labels"

    resp = await test_client.post(path, json={"labelID": "1111111111111111"})
    assert resp.status_code == 201
    assert resp.json()["label"]["name"] == "prod"

    resp = await test_client.get(path)
    assert [label["id"] for label in resp.json()["labels"]] == ["1111111111111111"]

    resp = await test_client.delete(f"{path}/1111111111111111")
    assert resp.status_code == 204

    resp = await test_client.delete(f"{path}/1111111111111111")
    assert resp.status_code == 404


async def test_add_label_to_missing_endpoint(test_client, labels):
    labels.add("1111111111111111", "prod")
    resp = await test_client.post(
        f"{BASE}/0000000000000000/labels", json={"labelID": "1111111111111111"}
    )
    assert resp.status_code == 404
