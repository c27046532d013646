"""Subscriber factory: selects implementation from config. Only place that imports concrete subscribers."""
from __future__ import annotations

from echo_pubsub.app.config.settings import Settings
from echo_pubsub.app.domain.node_identity import NodeIdentity
from echo_pubsub.app.infrastructure.messaging.google.google_pubsub_subscriber import GooglePubsubSubscriber
from echo_pubsub.app.ports.message_handler import PubsubMessageHandler
from echo_pubsub.app.ports.pubsub_subscriber import PubsubSubscriber


def create_subscribers(
    settings: Settings,
    handler: PubsubMessageHandler,
    node_identity: NodeIdentity,
) -> list[PubsubSubscriber]:
    backend = settings.pubsub_type.strip().lower()

    if backend == "google":
        return [
            GooglePubsubSubscriber.build_subscriber(
                subscription.name,
                subscription.project,
                subscription.json_path,
                subscription.ack_deadline_seconds,
                handler,
                subscription.template_path,
                node_identity.identity,
                credentials_strict=settings.credentials_strict,
            )
            for subscription in settings.google_subscriptions
            if subscription.enabled
        ]

    raise ValueError(f"Unsupported pubsub type: {backend}")
