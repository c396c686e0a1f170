"""
Create all tables for the configured DATABASE_URL.

Run once before the first start:
  python -m app.db.init_db
"""
import asyncio

import app.auth.models  # noqa: F401
import app.core.models  # noqa: F401
from app.db.session import Base, engine


async def init_db() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    print("Tables created:", ", ".join(sorted(Base.metadata.tables)))


async def main() -> None:
    try:
        await init_db()
    finally:
        await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
