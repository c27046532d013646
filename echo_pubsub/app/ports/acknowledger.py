"""Port: single-use ack/nack capability handed to message handlers."""
from __future__ import annotations

from typing import Protocol


class MessageAcknowledger(Protocol):
    """At most one of ack()/nack() takes effect. Both return whether the call did."""

    @property
    def consumed(self) -> bool: ...

    def ack(self) -> bool: ...

    def nack(self) -> bool: ...
