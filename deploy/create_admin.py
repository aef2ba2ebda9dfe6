#!/usr/bin/env python3
"""
Create an administrator, or reset the password of an existing one.

Usage:
    python deploy/create_admin.py <username> <password>
"""
import argparse
import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from wayamba.auth import hash_password
from wayamba.config import Settings
from wayamba.models import AdminUser


async def upsert_admin(session: AsyncSession, username: str, password: str, rounds: int = 12) -> bool:
    """
    Store ``username`` with a fresh bcrypt hash of ``password``.

    Returns True when a new admin was created, False when an existing one
    had its password replaced.
    """
    password_hash = hash_password(password, rounds=rounds)
    result = await session.execute(select(AdminUser).where(AdminUser.username == username))
    user = result.scalar_one_or_none()

    created = user is None
    if created:
        session.add(AdminUser(username=username, password_hash=password_hash))
    else:
        user.password_hash = password_hash

    await session.commit()
    return created


async def main(username: str, password: str) -> int:
    database_url = Settings.from_env().database_url
    engine = create_async_engine(database_url)
    async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    try:
        async with async_session() as session:
            created = await upsert_admin(session, username, password)
    except Exception as e:
        print(f"ERROR: Could not store admin user: {e}", file=sys.stderr)
        return 1
    finally:
        await engine.dispose()

    print("Admin user created." if created else "Admin user updated.")
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create or update a Wayamba administrator")
    parser.add_argument("username")
    parser.add_argument("password")
    args = parser.parse_args()

    if not args.username.strip() or not args.password:
        parser.error("username and password must not be empty")

    sys.exit(asyncio.run(main(args.username.strip(), args.password)))
