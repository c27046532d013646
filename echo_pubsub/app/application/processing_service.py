from __future__ import annotations

import hashlib
from typing import Any

from loguru import logger

from echo_pubsub.app.core import SERVICE_NAME
from echo_pubsub.app.domain.models import MessageDescription
from echo_pubsub.app.ports.acknowledger import MessageAcknowledger
from echo_pubsub.app.ports.event_sink import EventSink
from echo_pubsub.app.ports.message_lock_store import MessageLockStore


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


def message_key(description: MessageDescription) -> str:
    digest = hashlib.sha256(description.message_payload.encode("utf-8")).hexdigest()
    return f"{description.pubsub_type.value}:echo-pubsub:{description.subscription_name}:{digest}"


class ProcessingService:
    """
    Default PubsubMessageHandler: handles each distinct payload once within this process.

    A lock keyed on the payload digest is held for the message's ack deadline.
    The delivery that wins the lock acks, forwards the description to the sink and
    then marks the key handled for the retention deadline, so redeliveries and
    duplicate publishes inside that window are nacked without reprocessing.
    """

    def __init__(self, lock_store: MessageLockStore, event_sink: EventSink) -> None:
        self._lock_store = lock_store
        self._event_sink = event_sink

    def handle_message(
        self,
        description: MessageDescription,
        acknowledger: MessageAcknowledger,
        node_identity: str,
    ) -> None:
        key = message_key(description)
        if not self._lock_store.acquire(key, node_identity, description.ack_deadline_millis):
            acknowledger.nack()
            _log(
                "pubsub_message_duplicate",
                subscription=description.subscription_name,
                message_id=description.message_id,
                node=node_identity,
            )
            return

        acknowledger.ack()
        try:
            self._event_sink.post(description)
        except Exception:
            self._lock_store.release(key, node_identity)
            raise
        self._lock_store.mark_handled(key, node_identity, description.retention_deadline_millis)
        _log(
            "pubsub_message_processed",
            subscription=description.subscription_name,
            message_id=description.message_id,
            node=node_identity,
            artifact_count=len(description.artifacts),
        )
