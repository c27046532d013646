"""Port: application handler for translated messages."""
from __future__ import annotations

from typing import Protocol

from echo_pubsub.app.domain.models import MessageDescription
from echo_pubsub.app.ports.acknowledger import MessageAcknowledger


class PubsubMessageHandler(Protocol):
    """Called concurrently from broker worker threads; must not assume delivery order.

    The handler owns acknowledgement: the message stays unacked until it calls
    ack() or nack(), possibly after handle_message has returned.
    """

    def handle_message(
        self,
        description: MessageDescription,
        acknowledger: MessageAcknowledger,
        node_identity: str,
    ) -> None: ...
