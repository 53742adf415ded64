"""Cache entries and the error raised for missing keys."""

from __future__ import annotations

import time
from dataclasses import dataclass, field


class KeyNotFoundError(KeyError):
    """Raised when a key is absent from the cache or has expired."""

    def __init__(self, key: str | None = None) -> None:
        super().__init__(key)
        self.key = key

    def __str__(self) -> str:
        return "key not found"


@dataclass
class CacheItem:
    """A stored value with expiry, access and compression metadata.

    Times are ``time.monotonic()`` seconds; ``expire_at`` of ``None`` means
    the entry never expires.
    """

    key: str
    value: bytes | None = None
    size: int = 0
    expire_at: float | None = None
    created_at: float = field(default_factory=time.monotonic)
    access_at: float = field(default_factory=time.monotonic)
    access_count: int = 0
    compressed: bool = False

    def is_expired(self, now: float | None = None) -> bool:
        """Return True if the entry has an expiry strictly before ``now``."""
        if self.expire_at is None:
            return False
        if now is None:
            now = time.monotonic()
        return now > self.expire_at