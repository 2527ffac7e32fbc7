"""Initialize database tables (legacy and three-tier)"""
import asyncio
from crewer.database import engine, Base
from crewer.models import *  # noqa: F401,F403 - Import all models to register them


async def init():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    await engine.dispose()
    print(f"Created {len(Base.metadata.tables)} tables.")


if __name__ == "__main__":
    asyncio.run(init())
