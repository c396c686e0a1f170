import pytest
from httpx import AsyncClient


@pytest.fixture()
async def leave(client: AsyncClient, coordinator, deputy, auth) -> dict:
    response = await client.post(
        "/api/v1/leaves",
        json={"deputy_id": deputy.staff_id, "start_date": "2024-03-01", "end_date": "2024-03-05"},
        headers=auth(coordinator),
    )
    return response.json()["data"]["leave_request"]


@pytest.mark.asyncio
async def test_parties_add_and_read_statements(client: AsyncClient, leave, admin, coordinator, deputy, auth) -> None:
    for user, text in ((coordinator, "Handover notes attached"), (deputy, "Happy to cover"), (admin, "Noted")):
        response = await client.post(
            "/api/v1/leave-statements",
            json={"leave_request_id": leave["id"], "statement_text": text},
            headers=auth(user),
        )
        assert response.status_code == 201
        assert response.json()["data"]["leave_statement"]["author_id"] == user.staff_id

    listing = await client.get(f"/api/v1/leave-statements/leave-request/{leave['id']}", headers=auth(deputy))
    assert listing.status_code == 200
    body = listing.json()
    assert body["results"] == 3
    assert [s["statement_text"] for s in body["data"]["leave_statements"]] == [
        "Noted",
        "Happy to cover",
        "Handover notes attached",
    ]
    assert body["data"]["leave_statements"][0]["author"]["name"] == "Ada Admin"

    sid = body["data"]["leave_statements"][-1]["id"]
    single = await client.get(f"/api/v1/leave-statements/{sid}", headers=auth(coordinator))
    assert single.json()["data"]["leave_statement"]["statement_text"] == "Handover notes attached"


@pytest.mark.asyncio
async def test_outsider_cannot_touch_statements(client: AsyncClient, leave, make_user, coordinator, auth) -> None:
    outsider = await make_user("44445555")
    created = await client.post(
        "/api/v1/leave-statements",
        json={"leave_request_id": leave["id"], "statement_text": "Hello"},
        headers=auth(coordinator),
    )
    sid = created.json()["data"]["leave_statement"]["id"]

    write = await client.post(
        "/api/v1/leave-statements",
        json={"leave_request_id": leave["id"], "statement_text": "Me too"},
        headers=auth(outsider),
    )
    assert write.status_code == 403
    assert (await client.get(f"/api/v1/leave-statements/leave-request/{leave['id']}", headers=auth(outsider))).status_code == 403
    assert (await client.get(f"/api/v1/leave-statements/{sid}", headers=auth(outsider))).status_code == 403


@pytest.mark.asyncio
async def test_statement_needs_existing_leave(client: AsyncClient, coordinator, auth) -> None:
    response = await client.post(
        "/api/v1/leave-statements",
        json={"leave_request_id": 999, "statement_text": "Orphan"},
        headers=auth(coordinator),
    )
    assert response.status_code == 404
    assert (await client.get("/api/v1/leave-statements/999", headers=auth(coordinator))).status_code == 404


@pytest.mark.asyncio
async def test_statements_are_append_only(client: AsyncClient, leave, coordinator, auth) -> None:
    created = await client.post(
        "/api/v1/leave-statements",
        json={"leave_request_id": leave["id"], "statement_text": "Draft"},
        headers=auth(coordinator),
    )
    sid = created.json()["data"]["leave_statement"]["id"]
    assert (await client.put(f"/api/v1/leave-statements/{sid}", json={"statement_text": "x"}, headers=auth(coordinator))).status_code == 405
    assert (await client.delete(f"/api/v1/leave-statements/{sid}", headers=auth(coordinator))).status_code == 405
