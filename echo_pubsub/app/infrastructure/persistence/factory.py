"""Message lock store factory: selects implementation from config."""
from __future__ import annotations

from echo_pubsub.app.config.settings import Settings
from echo_pubsub.app.infrastructure.persistence.inmemory.in_memory_lock_store import InMemoryMessageLockStore
from echo_pubsub.app.ports.message_lock_store import MessageLockStore


def create_message_lock_store(settings: Settings) -> MessageLockStore:
    backend = settings.message_lock_backend.strip().lower()

    if backend == "inmemory":
        return InMemoryMessageLockStore()

    raise ValueError(f"Unsupported message lock backend: {backend}")
