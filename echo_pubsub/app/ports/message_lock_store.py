"""Port: cross-delivery message locks used to deduplicate handling."""
from __future__ import annotations

from typing import Protocol


class MessageLockStore(Protocol):
    def acquire(self, key: str, owner: str, ttl_millis: int) -> bool:
        """Take the lock for ttl_millis. False if held or already handled."""
        ...

    def mark_handled(self, key: str, owner: str, ttl_millis: int) -> None:
        """Record the message as handled; later acquires fail until ttl_millis elapses."""
        ...

    def release(self, key: str, owner: str) -> None:
        """Drop a lock held by owner. No-op if someone else holds it."""
        ...
