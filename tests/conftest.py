import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")

from typing import AsyncGenerator, List, Optional, Tuple

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from app.auth.models import User
from app.auth.security import hash_password, token_for_user
from app.core.enums import UserRole, UserStatus
from app.core.notifications import Notifier, get_notifier
from app.db.session import Base, build_engine, get_db
from app.main import app


TEST_DATABASE_URL = "sqlite+aiosqlite://"
DEFAULT_PASSWORD = "Secret123"


class RecordingNotifier(Notifier):
    """Captures outgoing mail instead of sending it. fail=True makes every send raise."""

    def __init__(self) -> None:
        self.sent: List[Tuple[str, str, str]] = []
        self.fail = False

    async def notify(self, to_address: str, subject: str, body: str) -> bool:
        if self.fail:
            raise ConnectionError("SMTP unavailable")
        self.sent.append((to_address, subject, body))
        return True

    def to(self, address: str) -> List[Tuple[str, str, str]]:
        return [m for m in self.sent if m[0] == address]


@pytest.fixture()
async def session_factory() -> AsyncGenerator[async_sessionmaker, None]:
    """Fresh in-memory database per test; every session shares its single connection."""
    engine = build_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    factory = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
    yield factory
    await engine.dispose()


@pytest.fixture()
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture()
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture()
async def client(session_factory, notifier: RecordingNotifier) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client bound to the FastAPI app."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notifier] = lambda: notifier
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture()
def make_user(session_factory):
    async def _make_user(
        staff_id: str,
        role: UserRole = UserRole.COORDINATOR,
        first_name: str = "Test",
        last_name: Optional[str] = None,
        email: Optional[str] = None,
        status: UserStatus = UserStatus.ACTIVE,
        password: str = DEFAULT_PASSWORD,
    ) -> User:
        async with session_factory() as session:
            user = User(
                staff_id=staff_id,
                first_name=first_name,
                last_name=last_name or staff_id,
                email=email or f"{staff_id}@curtin.edu.au",
                password_hash=hash_password(password),
                role=role.value,
                status=status.value,
            )
            session.add(user)
            await session.commit()
            return user

    return _make_user


def auth_header(user: User) -> dict:
    return {"Authorization": f"Bearer {token_for_user(user)}"}


@pytest.fixture()
async def admin(make_user) -> User:
    return await make_user("00000001", role=UserRole.ADMIN, first_name="Ada", last_name="Admin")


@pytest.fixture()
async def coordinator(make_user) -> User:
    return await make_user("12345678", first_name="Carol", last_name="Coord")


@pytest.fixture()
async def deputy(make_user) -> User:
    return await make_user("87654321", first_name="Dan", last_name="Deputy")


@pytest.fixture()
def auth():
    return auth_header
