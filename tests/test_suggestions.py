import pytest
from httpx import AsyncClient

from app.api.v1.suggestions import service as suggestion_service
from app.api.v1.suggestions.repository import SuggestionRepository
from app.auth.schemas import CurrentUser
from app.core.enums import RequestStatus, UserRole
from app.core.exceptions import ConflictError


@pytest.mark.asyncio
async def test_suggestion_reject_flow(client: AsyncClient, admin, coordinator, deputy, auth, notifier) -> None:
    created = await client.post(
        "/api/v1/suggestions",
        json={"suggestion_text": "Add more parking"},
        headers=auth(coordinator),
    )
    assert created.status_code == 201
    suggestion = created.json()["data"]["suggestion"]
    assert suggestion["status"] == "pending"
    assert suggestion["coordinator_id"] == coordinator.staff_id

    rejected = await client.patch(
        f"/api/v1/suggestions/{suggestion['id']}/reject",
        json={"admin_comments": "Not feasible"},
        headers=auth(admin),
    )
    assert rejected.status_code == 200
    body = rejected.json()["data"]["suggestion"]
    assert body["status"] == "rejected"
    assert body["admin_comments"] == "Not feasible"
    assert body["reviewed_by"] == admin.staff_id
    assert notifier.to(coordinator.email)[0][1] == "Suggestion Rejected"

    # deputy is another non-admin coordinator
    forbidden = await client.get(f"/api/v1/suggestions/coordinator/{coordinator.staff_id}", headers=auth(deputy))
    assert forbidden.status_code == 403


@pytest.mark.asyncio
async def test_suggestion_text_is_verbatim(client: AsyncClient, admin, coordinator, auth) -> None:
    text = "  Longer <b>lunch</b> breaks, please!\nThanks  "
    created = await client.post("/api/v1/suggestions", json={"suggestion_text": text}, headers=auth(coordinator))
    assert created.status_code == 201

    own = await client.get(f"/api/v1/suggestions/coordinator/{coordinator.staff_id}", headers=auth(coordinator))
    assert own.json()["results"] == 1
    assert own.json()["data"]["suggestions"][0]["suggestion_text"] == text

    every = await client.get("/api/v1/suggestions", headers=auth(admin))
    assert every.json()["data"]["suggestions"][0]["suggestion_text"] == text
    assert every.json()["data"]["suggestions"][0]["coordinator"]["name"] == "Carol Coord"


@pytest.mark.asyncio
@pytest.mark.parametrize("text", ["", "   ", "x" * 1001])
async def test_suggestion_text_validation(client: AsyncClient, coordinator, auth, text) -> None:
    response = await client.post("/api/v1/suggestions", json={"suggestion_text": text}, headers=auth(coordinator))
    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "suggestion_text"


@pytest.mark.asyncio
async def test_suggestion_processed_once(client: AsyncClient, admin, coordinator, auth) -> None:
    created = await client.post("/api/v1/suggestions", json={"suggestion_text": "Coffee"}, headers=auth(coordinator))
    sid = created.json()["data"]["suggestion"]["id"]

    assert (await client.patch(f"/api/v1/suggestions/{sid}/approve", headers=auth(admin))).status_code == 200
    again = await client.patch(f"/api/v1/suggestions/{sid}/reject", headers=auth(admin))
    assert again.status_code == 409

    single = await client.get(f"/api/v1/suggestions/{sid}", headers=auth(admin))
    assert single.json()["data"]["suggestion"]["status"] == "approved"


@pytest.mark.asyncio
async def test_suggestion_admin_endpoints(client: AsyncClient, coordinator, admin, auth) -> None:
    assert (await client.get("/api/v1/suggestions", headers=auth(coordinator))).status_code == 403
    assert (await client.get("/api/v1/suggestions/1", headers=auth(coordinator))).status_code == 403
    assert (await client.get("/api/v1/suggestions/1", headers=auth(admin))).status_code == 404
    assert (await client.patch("/api/v1/suggestions/1/approve", headers=auth(admin))).status_code == 404


@pytest.mark.asyncio
async def test_admin_reads_any_coordinator_suggestions(client: AsyncClient, admin, coordinator, auth) -> None:
    await client.post("/api/v1/suggestions", json={"suggestion_text": "One"}, headers=auth(coordinator))
    await client.post("/api/v1/suggestions", json={"suggestion_text": "Two"}, headers=auth(coordinator))

    response = await client.get(f"/api/v1/suggestions/coordinator/{coordinator.staff_id}", headers=auth(admin))
    assert response.status_code == 200
    assert [s["suggestion_text"] for s in response.json()["data"]["suggestions"]] == ["Two", "One"]


@pytest.mark.asyncio
async def test_review_loses_race_to_concurrent_review(
    client: AsyncClient, session_factory, admin, coordinator, auth, notifier
) -> None:
    created = await client.post("/api/v1/suggestions", json={"suggestion_text": "Longer breaks"}, headers=auth(coordinator))
    sid = created.json()["data"]["suggestion"]["id"]
    reviewer = CurrentUser(id=admin.id, staff_id=admin.staff_id, email=admin.email, role=UserRole.ADMIN)

    async with session_factory() as stale:
        assert (await SuggestionRepository(stale).find_by_id(sid)).status == "pending"

        async with session_factory() as other:
            assert await SuggestionRepository(other).transition(sid, RequestStatus.APPROVED, admin.staff_id)
            await other.commit()

        with pytest.raises(ConflictError) as exc:
            await suggestion_service.reject_suggestion(stale, notifier, sid, reviewer)
        assert exc.value.message == "This suggestion has already been processed"
        assert notifier.to(coordinator.email) == []

    single = await client.get(f"/api/v1/suggestions/{sid}", headers=auth(admin))
    assert single.json()["data"]["suggestion"]["status"] == "approved"


@pytest.mark.asyncio
async def test_own_suggestions_path_id_is_trimmed(client: AsyncClient, coordinator, auth) -> None:
    await client.post("/api/v1/suggestions", json={"suggestion_text": "One"}, headers=auth(coordinator))
    response = await client.get("/api/v1/suggestions/coordinator/12345678%20", headers=auth(coordinator))
    assert response.status_code == 200
    assert response.json()["results"] == 1
