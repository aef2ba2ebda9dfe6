#!/usr/bin/env python3
"""
Initialize database schema for production.
Run this once after setting up PostgreSQL.
"""
import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy.ext.asyncio import create_async_engine

from wayamba.config import Settings
from wayamba.models import Base


async def init_db(database_url: str) -> None:
    """Create all tables that do not exist yet."""
    engine = create_async_engine(database_url, echo=True)
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    finally:
        await engine.dispose()

    print("Database schema initialized successfully!")


if __name__ == "__main__":
    asyncio.run(init_db(Settings.from_env().database_url))
