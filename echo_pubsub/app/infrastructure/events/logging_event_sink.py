"""Event sink that writes handled messages to the log."""
from __future__ import annotations

from loguru import logger

from echo_pubsub.app.core import SERVICE_NAME
from echo_pubsub.app.domain.models import MessageDescription


class LoggingEventSink:
    """Implements echo_pubsub.app.ports.event_sink.EventSink."""

    def post(self, description: MessageDescription) -> None:
        logger.bind(
            service_name=SERVICE_NAME,
            event="pubsub_event",
            source=description.pubsub_type.value,
            subscription=description.subscription_name,
            message_id=description.message_id,
            artifacts=sorted(a.reference or a.name or "" for a in description.artifacts),
        ).info("")
