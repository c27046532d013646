"""Port: destination for handled message descriptions."""
from __future__ import annotations

from typing import Protocol

from echo_pubsub.app.domain.models import MessageDescription


class EventSink(Protocol):
    def post(self, description: MessageDescription) -> None: ...
