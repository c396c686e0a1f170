import pytest
from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.models import User
from app.core.enums import UserStatus
from app.auth.security import create_access_token


REGISTER_PAYLOAD = {
    "staff_id": "11112222",
    "first_name": "Jane",
    "last_name": "Doe",
    "email": "jane.doe@curtin.edu.au",
    "password": "StrongPass123",
    "phone": "0400000000",
}


@pytest.mark.asyncio
async def test_register_creates_coordinator(client: AsyncClient, db_session: AsyncSession, notifier) -> None:
    response = await client.post("/api/v1/auth/register", json=REGISTER_PAYLOAD)
    assert response.status_code == 201
    data = response.json()

    assert data["status"] == "success"
    assert data["message"] == "User registered successfully"
    assert data["data"]["token"]
    assert data["data"]["user"]["role"] == "coordinator"
    assert data["data"]["user"]["name"] == "Jane Doe"
    assert "password_hash" not in data["data"]["user"]

    user = (await db_session.execute(select(User).where(User.staff_id == "11112222"))).scalar_one()
    assert user.role == "coordinator"
    assert user.password_hash != REGISTER_PAYLOAD["password"]

    assert len(notifier.to("jane.doe@curtin.edu.au")) == 1


@pytest.mark.asyncio
async def test_register_ignores_requested_role(client: AsyncClient) -> None:
    response = await client.post("/api/v1/auth/register", json={**REGISTER_PAYLOAD, "role": "admin"})
    assert response.status_code == 201
    assert response.json()["data"]["user"]["role"] == "coordinator"


@pytest.mark.asyncio
async def test_register_duplicate_email_conflicts(client: AsyncClient) -> None:
    first = await client.post("/api/v1/auth/register", json=REGISTER_PAYLOAD)
    assert first.status_code == 201
    second = await client.post("/api/v1/auth/register", json={**REGISTER_PAYLOAD, "staff_id": "33334444"})
    assert second.status_code == 409
    assert second.json()["status"] == "error"


@pytest.mark.asyncio
async def test_register_rejects_short_staff_id(client: AsyncClient) -> None:
    response = await client.post("/api/v1/auth/register", json={**REGISTER_PAYLOAD, "staff_id": "123"})
    assert response.status_code == 400
    body = response.json()
    assert body["message"] == "Validation error"
    assert body["errors"][0]["field"] == "staff_id"


@pytest.mark.asyncio
async def test_login_success(client: AsyncClient, coordinator) -> None:
    response = await client.post(
        "/api/v1/auth/login",
        json={"email": coordinator.email, "password": "Secret123"},
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["token"]
    assert data["token_type"] == "bearer"
    assert data["user"]["staff_id"] == coordinator.staff_id


@pytest.mark.asyncio
async def test_login_invalid_credentials(client: AsyncClient, coordinator) -> None:
    response = await client.post(
        "/api/v1/auth/login",
        json={"email": coordinator.email, "password": "WrongPassword"},
    )
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid credentials"


@pytest.mark.asyncio
async def test_login_inactive_account(client: AsyncClient, make_user) -> None:
    user = await make_user("55556666", status=UserStatus.INACTIVE)
    response = await client.post("/api/v1/auth/login", json={"email": user.email, "password": "Secret123"})
    assert response.status_code == 401
    assert response.json()["message"] == "Account is inactive"


@pytest.mark.asyncio
async def test_login_oauth_form(client: AsyncClient, coordinator) -> None:
    response = await client.post(
        "/api/v1/auth/login-oauth",
        data={"username": coordinator.email, "password": "Secret123"},
    )
    assert response.status_code == 200
    assert response.json()["token_type"] == "bearer"


@pytest.mark.asyncio
async def test_me_requires_token(client: AsyncClient) -> None:
    response = await client.get("/api/v1/auth/me")
    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"


@pytest.mark.asyncio
async def test_me_rejects_expired_token(client: AsyncClient, coordinator) -> None:
    token = create_access_token(subject={"sub": str(coordinator.id)}, expires_minutes=-1)
    response = await client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401
    assert "expired" in response.json()["message"]


@pytest.mark.asyncio
async def test_me_returns_profile_and_courses(client: AsyncClient, admin, coordinator, auth) -> None:
    created = await client.post(
        "/api/v1/courses",
        json={"course_code": "cs101", "course_name": "Intro to CS", "coordinator_id": coordinator.staff_id},
        headers=auth(admin),
    )
    assert created.status_code == 201

    response = await client.get("/api/v1/auth/me", headers=auth(coordinator))
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["user"]["email"] == coordinator.email
    assert [c["course_code"] for c in data["courses"]] == ["CS101"]


@pytest.mark.asyncio
async def test_token_of_deactivated_user_is_rejected(client: AsyncClient, admin, coordinator, auth) -> None:
    deactivated = await client.delete(f"/api/v1/users/{coordinator.staff_id}", headers=auth(admin))
    assert deactivated.status_code == 200
    response = await client.get("/api/v1/auth/me", headers=auth(coordinator))
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_update_password(client: AsyncClient, coordinator, auth) -> None:
    wrong = await client.put(
        "/api/v1/auth/update-password",
        json={"current_password": "nope", "new_password": "NewSecret1"},
        headers=auth(coordinator),
    )
    assert wrong.status_code == 401

    ok = await client.put(
        "/api/v1/auth/update-password",
        json={"current_password": "Secret123", "new_password": "NewSecret1"},
        headers=auth(coordinator),
    )
    assert ok.status_code == 200

    login = await client.post("/api/v1/auth/login", json={"email": coordinator.email, "password": "NewSecret1"})
    assert login.status_code == 200


@pytest.mark.asyncio
async def test_logout(client: AsyncClient, coordinator, auth) -> None:
    response = await client.post("/api/v1/auth/logout", headers=auth(coordinator))
    assert response.status_code == 200
    assert response.json()["message"] == "Logged out successfully"
