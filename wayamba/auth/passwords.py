"""Password hashing (bcrypt) and admin credential checks."""

import asyncio
import logging

import bcrypt
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from wayamba.errors import InvalidCredentials
from wayamba.models import AdminUser

logger = logging.getLogger("Wayamba.auth")

DEFAULT_ROUNDS = 12


def hash_password(password: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """
    Hash a password using bcrypt with salt.

    Args:
        password: The plaintext password to hash
        rounds: bcrypt cost factor

    Returns:
        The bcrypt hash string (includes salt)
    """
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check a password against its bcrypt hash. Malformed hashes never match."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


# Checked when the username is unknown so both failure paths cost one bcrypt run.
DUMMY_HASH = hash_password("wayamba-unknown-user")


async def authenticate(session: AsyncSession, username: str, password: str) -> AdminUser:
    """
    Return the admin whose credentials match, or raise ``InvalidCredentials``.

    An unknown username and a wrong password produce the same error.
    """
    result = await session.execute(select(AdminUser).where(AdminUser.username == username))
    user = result.scalar_one_or_none()

    stored_hash = user.password_hash if user is not None else DUMMY_HASH
    matches = await asyncio.to_thread(verify_password, password, stored_hash)

    if user is None or not matches:
        logger.warning("Failed admin login attempt")
        raise InvalidCredentials()

    logger.info(f"Admin authenticated: {user.username}")
    return user
