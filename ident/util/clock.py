"""Clock and randomness sources.

Use cases take these as constructor arguments so tests can pin time and
entropy.
"""

import secrets
from collections.abc import Callable
from datetime import datetime, timezone

Clock = Callable[[], datetime]
RandomBytes = Callable[[int], bytes]


def utc_now() -> datetime:
    """Current time, timezone-aware UTC."""
    return datetime.now(timezone.utc)


def system_random_bytes(length: int) -> bytes:
    """Cryptographically strong random bytes."""
    return secrets.token_bytes(length)
