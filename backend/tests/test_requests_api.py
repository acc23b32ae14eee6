"""Tests for the request endpoints and their error mapping."""

import uuid

import pytest
from httpx import ASGITransport, AsyncClient

from approvaldesk.main import app


async def _post_request(client: AsyncClient, **overrides) -> dict:
    body = {
        "title": "Laptop",
        "description": "New dev laptop",
        "requester_id": 1,
        "approver_id": 2,
        "request_type_id": 1,
    }
    body.update(overrides)
    res = await client.post("/api/v1/requests", json=body)
    assert res.status_code == 201, res.text
    return res.json()


@pytest.mark.asyncio
async def test_create_request(client: AsyncClient, directory) -> None:
    data = await _post_request(client)
    assert data["status"] == "PENDING"
    assert data["related_user_name"] == "Jane Smith"
    assert data["type_name"] == "DEPLOYMENT"
    uuid.UUID(data["id"])


@pytest.mark.asyncio
async def test_create_request_unknown_approver_is_404(client: AsyncClient, directory) -> None:
    res = await client.post(
        "/api/v1/requests",
        json={"title": "Laptop", "requester_id": 1, "approver_id": 42, "request_type_id": 1},
    )
    assert res.status_code == 404
    assert res.json()["detail"] == "Approver not found with ID: 42"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [
        {"title": "   ", "requester_id": 1, "approver_id": 2, "request_type_id": 1},
        {"title": "", "requester_id": 1, "approver_id": 2, "request_type_id": 1},
        {"title": "Laptop", "approver_id": 2, "request_type_id": 1},
    ],
)
async def test_create_request_validation(client: AsyncClient, directory, body) -> None:
    res = await client.post("/api/v1/requests", json=body)
    assert res.status_code == 422


@pytest.mark.asyncio
async def test_approve_flow(client: AsyncClient, directory) -> None:
    created = await _post_request(client)
    rid = created["id"]

    res = await client.post(f"/api/v1/requests/{rid}/approve", json={"approver_id": 2, "comments": "ok"})
    assert res.status_code == 200
    assert res.json()["status"] == "APPROVED"

    res = await client.get(f"/api/v1/requests/{rid}")
    assert res.status_code == 200
    details = res.json()
    assert details["status"] == "APPROVED"
    assert details["comments"] == "ok"
    assert details["description"] == "New dev laptop"

    res = await client.get(f"/api/v1/requests/{rid}/history")
    assert res.status_code == 200
    [entry] = res.json()
    assert entry["action_taken"] == "APPROVED"
    assert entry["user_id"] == 2

    res = await client.post(f"/api/v1/requests/{rid}/approve", json={"approver_id": 2, "comments": "ok"})
    assert res.status_code == 400
    assert "APPROVED" in res.json()["detail"]


@pytest.mark.asyncio
async def test_reject_by_wrong_approver_is_403(client: AsyncClient, directory) -> None:
    created = await _post_request(client)
    rid = created["id"]

    res = await client.post(f"/api/v1/requests/{rid}/reject", json={"approver_id": 999})
    assert res.status_code == 403
    assert "999" in res.json()["detail"]

    res = await client.get(f"/api/v1/requests/{rid}")
    assert res.json()["status"] == "PENDING"


@pytest.mark.asyncio
async def test_unknown_request_is_404(client: AsyncClient, directory) -> None:
    rid = uuid.uuid4()
    assert (await client.get(f"/api/v1/requests/{rid}")).status_code == 404
    assert (await client.get(f"/api/v1/requests/{rid}/history")).status_code == 404
    res = await client.post(f"/api/v1/requests/{rid}/approve", json={"approver_id": 2})
    assert res.status_code == 404


@pytest.mark.asyncio
async def test_malformed_request_id_is_422(client: AsyncClient, directory) -> None:
    res = await client.get("/api/v1/requests/not-a-uuid")
    assert res.status_code == 422


@pytest.mark.asyncio
async def test_created_and_assigned_lists(client: AsyncClient, directory) -> None:
    first = await _post_request(client, title="First")
    second = await _post_request(client, title="Second")

    res = await client.get("/api/v1/requests/created/1")
    assert res.status_code == 200
    assert [r["id"] for r in res.json()] == [second["id"], first["id"]]

    res = await client.get("/api/v1/requests/assigned/2")
    assert [r["related_user_name"] for r in res.json()] == ["John Doe", "John Doe"]

    res = await client.get("/api/v1/requests/assigned/777")
    assert res.status_code == 200
    assert res.json() == []


@pytest.mark.asyncio
async def test_internal_error_is_500(client: AsyncClient, workflow, directory, monkeypatch) -> None:
    async def boom(user_id: int):
        raise RuntimeError("store unavailable")

    monkeypatch.setattr(workflow, "get_requests_created_by_user", boom)
    transport = ASGITransport(app=app, raise_app_exceptions=False)  # type: ignore[arg-type]
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        res = await ac.get("/api/v1/requests/created/1")
    assert res.status_code == 500
    assert res.json() == {"detail": "Internal server error"}


@pytest.mark.asyncio
async def test_health(client: AsyncClient) -> None:
    assert (await client.get("/health")).json() == {"status": "ok"}
    assert (await client.get("/api/v1/status")).json() == {"api": "up"}


@pytest.mark.asyncio
async def test_created_at_serialises_identically_across_views(client: AsyncClient, directory) -> None:
    created = await _post_request(client)

    [listed] = (await client.get("/api/v1/requests/created/1")).json()
    [assigned] = (await client.get("/api/v1/requests/assigned/2")).json()
    details = (await client.get(f"/api/v1/requests/{created['id']}")).json()

    assert listed["created_at"] == created["created_at"]
    assert assigned["created_at"] == created["created_at"]
    assert details["created_at"] == created["created_at"]
    assert created["created_at"].endswith("Z")
