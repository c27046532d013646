"""Adapter: wrap a google.cloud.pubsub_v1 Message to implement ports.IncomingMessage."""
from __future__ import annotations

from typing import Mapping

from google.cloud.pubsub_v1.subscriber.message import Message as GooglePubsubMessage


class GooglePubsubMessageAdapter:
    """Implements echo_pubsub.app.ports.incoming_message.IncomingMessage for Google Pub/Sub."""

    def __init__(self, message: GooglePubsubMessage) -> None:
        self._message = message

    @property
    def data(self) -> bytes:
        return self._message.data

    @property
    def attributes(self) -> Mapping[str, str]:
        return dict(self._message.attributes or {})

    @property
    def message_id(self) -> str | None:
        return self._message.message_id

    def ack(self) -> None:
        self._message.ack()

    def nack(self) -> None:
        self._message.nack()
