"""Password hashing with bcrypt.

Each hash embeds its own random salt and work factor. Hashing and checking
are deliberately slow, so both run in the thread pool to keep the event loop
responsive.
"""

import bcrypt
from starlette.concurrency import run_in_threadpool

from payportal.core import settings


MAX_PASSWORD_BYTES = 72


def _hash(password: str, rounds: int) -> str:
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def _check(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


def check_password_bytes(password: str) -> str:
    """Reject passwords bcrypt cannot hash (more than 72 bytes as UTF-8)."""
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password must not exceed {MAX_PASSWORD_BYTES} bytes")
    return password


async def hash_password(password: str, rounds: int | None = None) -> str:
    """Hash a plaintext password with a fresh salt.

    Args:
        password: Plaintext password (at most 72 bytes).
        rounds: Work factor, defaults to ``BCRYPT_ROUNDS``.

    Returns:
        The bcrypt hash as text.
    """
    return await run_in_threadpool(_hash, password, rounds or settings.bcrypt_rounds)


async def verify_password(password: str, password_hash: str) -> bool:
    """Check a plaintext password against a stored bcrypt hash."""
    return await run_in_threadpool(_check, password, password_hash)
