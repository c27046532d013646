"""Single-use acknowledger wrapping one broker-native ack/nack pair."""
from __future__ import annotations

import threading
from typing import Any, Callable

from loguru import logger

from echo_pubsub.app.core import SERVICE_NAME


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


class SingleUseAcknowledger:
    """Implements echo_pubsub.app.ports.acknowledger.MessageAcknowledger.

    The first ack()/nack() reaches the broker; every later call is a no-op that
    logs a warning. Safe to call from any thread, including after the delivery
    callback has returned.
    """

    def __init__(
        self,
        ack: Callable[[], None],
        nack: Callable[[], None],
        *,
        message_id: str | None = None,
    ) -> None:
        self._ack = ack
        self._nack = nack
        self._message_id = message_id
        self._lock = threading.Lock()
        self._outcome: str | None = None

    @property
    def consumed(self) -> bool:
        with self._lock:
            return self._outcome is not None

    @property
    def outcome(self) -> str | None:
        """'ack', 'nack' or None while unused."""
        with self._lock:
            return self._outcome

    def ack(self) -> bool:
        return self._settle("ack", self._ack)

    def nack(self) -> bool:
        return self._settle("nack", self._nack)

    def _settle(self, outcome: str, call: Callable[[], None]) -> bool:
        with self._lock:
            previous = self._outcome
            if previous is None:
                self._outcome = outcome
        if previous is not None:
            logger.warning(
                "ignoring {} for message {}: already settled with {}",
                outcome,
                self._message_id,
                previous,
            )
            return False
        try:
            call()
        except Exception as exc:
            logger.error("{} failed for message {}: {}", outcome, self._message_id, exc)
            return False
        _log("pubsub_message_settled", outcome=outcome, message_id=self._message_id)
        return True

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message_id={self._message_id!r}, outcome={self._outcome!r})"
