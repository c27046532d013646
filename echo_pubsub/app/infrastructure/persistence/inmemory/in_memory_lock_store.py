"""In-memory MessageLockStore. Locks are local to this process."""
from __future__ import annotations

import threading
import time
from typing import Callable


class InMemoryMessageLockStore:
    """Implements echo_pubsub.app.ports.message_lock_store.MessageLockStore."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        # key -> (owner, expires_at seconds on clock)
        self._entries: dict[str, tuple[str, float]] = {}

    def _expires_at(self, ttl_millis: int) -> float:
        return self._clock() + ttl_millis / 1000.0

    def _purge_expired(self, now: float) -> None:
        expired = [k for k, (_, expires_at) in self._entries.items() if expires_at <= now]
        for key in expired:
            del self._entries[key]

    def acquire(self, key: str, owner: str, ttl_millis: int) -> bool:
        with self._lock:
            self._purge_expired(self._clock())
            if key in self._entries:
                return False
            self._entries[key] = (owner, self._expires_at(ttl_millis))
            return True

    def mark_handled(self, key: str, owner: str, ttl_millis: int) -> None:
        with self._lock:
            self._entries[key] = (owner, self._expires_at(ttl_millis))

    def release(self, key: str, owner: str) -> None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and entry[0] == owner:
                del self._entries[key]

    def __len__(self) -> int:
        with self._lock:
            self._purge_expired(self._clock())
            return len(self._entries)
