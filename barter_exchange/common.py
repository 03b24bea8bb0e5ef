"""Small helpers shared by the services."""

import asyncio
import secrets
import string
from datetime import datetime, timezone

_ID_ALPHABET = string.ascii_lowercase + string.digits


def generate_id(length: int = 16) -> str:
    """Random lowercase alphanumeric record id."""
    return "".join(secrets.choice(_ID_ALPHABET) for _ in range(length))


def generate_code(length: int, alphabet: str) -> str:
    """Random code drawn from alphabet."""
    return "".join(secrets.choice(alphabet) for _ in range(length))


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


async def simulate_latency(milliseconds: int) -> None:
    """Artificial API delay; a no-op for 0."""
    if milliseconds > 0:
        await asyncio.sleep(milliseconds / 1000)
