"""Port: subscriber attached to one broker subscription. Implementations live in infrastructure."""
from __future__ import annotations

from typing import Protocol

from echo_pubsub.app.constants import PubsubType, SubscriptionState


class PubsubConfigurationError(Exception):
    """Subscriber cannot be built from the given configuration."""


class CredentialsLoadError(PubsubConfigurationError):
    """Broker credentials could not be loaded."""


class PubsubSubscriber(Protocol):
    def subscription_name(self) -> str: ...

    def pubsub_type(self) -> PubsubType: ...

    @property
    def state(self) -> SubscriptionState: ...

    def start(self) -> None:
        """Begin receiving. Raises if the subscription cannot be opened."""
        ...

    def stop(self, timeout: float | None = None) -> None:
        """Stop receiving and release the connection. Idempotent."""
        ...
