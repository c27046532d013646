"""Per-delivery translation of broker messages into MessageDescriptions.

Invoked by the broker client's worker threads, possibly concurrently for
different messages on the same subscription. The receiver keeps no
per-message state: each delivery gets a fresh description and acknowledger.

Nothing raised while handling a delivery leaves __call__; failures are logged
and the message is left unacked for the broker to redeliver.
"""
from __future__ import annotations

from typing import Any, Callable

from loguru import logger

from echo_pubsub.app.application.acknowledger import SingleUseAcknowledger
from echo_pubsub.app.constants import (
    ACK_DEADLINE_MULTIPLIER,
    RETENTION_DEADLINE_MILLIS,
    PubsubType,
)
from echo_pubsub.app.core import SERVICE_NAME
from echo_pubsub.app.domain.artifact_translator import MessageArtifactTranslator
from echo_pubsub.app.domain.models import Artifact, MessageDescription
from echo_pubsub.app.ports.acknowledger import MessageAcknowledger
from echo_pubsub.app.ports.incoming_message import IncomingMessage
from echo_pubsub.app.ports.message_handler import PubsubMessageHandler


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


def compute_ack_deadline_millis(ack_deadline_seconds: int) -> int:
    """Processing-time ceiling: a 5x margin over the broker's configured deadline."""
    return ACK_DEADLINE_MULTIPLIER * ack_deadline_seconds * 1000


def default_acknowledger(message: IncomingMessage) -> MessageAcknowledger:
    return SingleUseAcknowledger(message.ack, message.nack, message_id=message.message_id)


class MessageReceiver:
    """Builds a MessageDescription per delivery and dispatches it to the handler."""

    def __init__(
        self,
        *,
        subscription_name: str,
        pubsub_type: PubsubType,
        ack_deadline_seconds: int,
        handler: PubsubMessageHandler,
        artifact_translator: MessageArtifactTranslator,
        node_identity: str,
        acknowledger_factory: Callable[[IncomingMessage], MessageAcknowledger] = default_acknowledger,
    ) -> None:
        if ack_deadline_seconds < 1:
            raise ValueError("ack_deadline_seconds must be at least 1")
        if compute_ack_deadline_millis(ack_deadline_seconds) >= RETENTION_DEADLINE_MILLIS:
            raise ValueError("ack deadline must be shorter than the retention deadline")
        self._subscription_name = subscription_name
        self._pubsub_type = pubsub_type
        self._ack_deadline_millis = compute_ack_deadline_millis(ack_deadline_seconds)
        self._handler = handler
        self._artifact_translator = artifact_translator
        self._node_identity = node_identity
        self._acknowledger_factory = acknowledger_factory

    @property
    def subscription_name(self) -> str:
        return self._subscription_name

    @property
    def ack_deadline_millis(self) -> int:
        return self._ack_deadline_millis

    @property
    def node_identity(self) -> str:
        return self._node_identity

    def __call__(self, message: IncomingMessage) -> None:
        self.receive_message(message)

    def receive_message(self, message: IncomingMessage) -> None:
        message_id = message.message_id
        try:
            description = self._describe(message)
            acknowledger = self._acknowledger_factory(message)
        except Exception as exc:
            logger.exception(
                "could not translate message {} on {}: {}",
                message_id,
                self._subscription_name,
                exc,
            )
            return

        _log(
            "pubsub_message_received",
            subscription=self._subscription_name,
            message_id=message_id,
            artifact_count=len(description.artifacts),
        )
        try:
            self._handler.handle_message(description, acknowledger, self._node_identity)
        except Exception as exc:
            # Left unacked on purpose: the broker redelivers once its own deadline passes.
            logger.exception(
                "handler failed for message {} on {}: {}",
                message_id,
                self._subscription_name,
                exc,
            )

    def _describe(self, message: IncomingMessage) -> MessageDescription:
        payload = bytes(message.data).decode("utf-8", errors="replace")
        logger.debug("Received message with payload: {}", payload)
        return MessageDescription(
            subscription_name=self._subscription_name,
            message_payload=payload,
            pubsub_type=self._pubsub_type,
            ack_deadline_millis=self._ack_deadline_millis,
            retention_deadline_millis=RETENTION_DEADLINE_MILLIS,
            artifacts=self._extract_artifacts(payload, message.message_id),
            message_id=message.message_id,
            message_attributes=dict(message.attributes or {}),
        )

    def _extract_artifacts(self, payload: str, message_id: str | None) -> frozenset[Artifact]:
        try:
            return frozenset(self._artifact_translator.parse_artifacts(payload))
        except Exception as exc:
            logger.warning(
                "artifact extraction failed for message {} on {}, continuing without artifacts: {}",
                message_id,
                self._subscription_name,
                exc,
            )
            return frozenset()
