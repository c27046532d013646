"""Port: abstraction for a broker-delivered message. Implementations live in infrastructure."""
from __future__ import annotations

from typing import Mapping, Protocol


class IncomingMessage(Protocol):
    """Transport-agnostic delivered message. Broker adapters implement it."""

    @property
    def data(self) -> bytes: ...

    @property
    def attributes(self) -> Mapping[str, str]: ...

    @property
    def message_id(self) -> str | None: ...

    def ack(self) -> None: ...

    def nack(self) -> None: ...
