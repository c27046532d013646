"""Registry of every subscriber running in this process."""
from __future__ import annotations

import threading
from typing import Iterable

from loguru import logger

from echo_pubsub.app.constants import PubsubType
from echo_pubsub.app.ports.pubsub_subscriber import PubsubSubscriber


class PubsubSubscribers:
    """Holds subscribers by registration order; starts and stops them as a group."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._subscribers: list[PubsubSubscriber] = []

    def put_all(self, subscribers: Iterable[PubsubSubscriber]) -> None:
        with self._lock:
            self._subscribers.extend(subscribers)

    def all(self) -> list[PubsubSubscriber]:
        with self._lock:
            return list(self._subscribers)

    def subscribed_to(self, pubsub_type: PubsubType) -> list[PubsubSubscriber]:
        return [s for s in self.all() if s.pubsub_type() == pubsub_type]

    def start_all(self) -> None:
        for subscriber in self.all():
            subscriber.start()

    def stop_all(self, timeout: float | None = None) -> None:
        for subscriber in self.all():
            try:
                subscriber.stop(timeout)
            except Exception as exc:
                logger.warning("stopping subscriber {} failed: {}", subscriber.subscription_name(), exc)

    def __len__(self) -> int:
        with self._lock:
            return len(self._subscribers)
