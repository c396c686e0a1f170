from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from app.core.config import settings


def build_engine(database_url: str = None, **overrides):
    """Async engine for the coordination database; tests pass their own url and pool."""
    options = {
        "echo": settings.db_echo,
        "pool_pre_ping": True,
        "pool_recycle": settings.db_pool_recycle,
    }
    options.update(overrides)
    return create_async_engine(database_url or settings.database_url, **options)


engine = build_engine()

# Objects stay readable after commit so services can build responses without a reload
AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

Base = declarative_base()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """One session per request; services commit, an unhandled error rolls back on close."""
    async with AsyncSessionLocal() as session:
        yield session
