"""Subscription lifecycle listeners."""
from __future__ import annotations

import threading

from loguru import logger

from echo_pubsub.app.constants import SubscriptionState


class SubscriptionListener:
    """Receives subscription state transitions. Hooks default to no-ops."""

    def starting(self) -> None:
        pass

    def running(self) -> None:
        pass

    def stopping(self, previous: SubscriptionState) -> None:
        pass

    def terminated(self, previous: SubscriptionState) -> None:
        pass

    def failed(self, previous: SubscriptionState, failure: BaseException) -> None:
        pass


class SubscriptionFailureListener(SubscriptionListener):
    """Reports transitions into FAILED. Restarting is left to the owning process."""

    def __init__(self, subscription_name: str) -> None:
        self._subscription_name = subscription_name
        self._lock = threading.Lock()
        self._failure: BaseException | None = None
        self._failure_count = 0

    @property
    def subscription_name(self) -> str:
        return self._subscription_name

    @property
    def last_failure(self) -> BaseException | None:
        with self._lock:
            return self._failure

    @property
    def failure_count(self) -> int:
        with self._lock:
            return self._failure_count

    def failed(self, previous: SubscriptionState, failure: BaseException) -> None:
        with self._lock:
            self._failure = failure
            self._failure_count += 1
        logger.error(
            "Pubsub listener for subscription name {} failure (was {}) caused by {}",
            self._subscription_name,
            previous.value,
            failure,
        )
