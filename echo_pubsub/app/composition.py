"""Subscriber composition root: build and lifecycle-manage concrete dependencies.

Composition may: import concrete classes, call factories, store interface types,
manage high-level lifecycle.
"""
from __future__ import annotations

from typing import Any

from loguru import logger

from echo_pubsub.app.application.processing_service import ProcessingService
from echo_pubsub.app.application.subscribers import PubsubSubscribers
from echo_pubsub.app.config.settings import Settings
from echo_pubsub.app.core import SERVICE_NAME
from echo_pubsub.app.domain.node_identity import NodeIdentity
from echo_pubsub.app.infrastructure.events.logging_event_sink import LoggingEventSink
from echo_pubsub.app.infrastructure.messaging.factory import create_subscribers
from echo_pubsub.app.infrastructure.persistence.factory import create_message_lock_store
from echo_pubsub.app.ports.event_sink import EventSink
from echo_pubsub.app.ports.message_handler import PubsubMessageHandler


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


class SubscriberDependencies:
    """Holds wired subscriber dependencies and their lifecycle."""

    def __init__(
        self,
        *,
        settings: Settings,
        node_identity: NodeIdentity | None = None,
        event_sink: EventSink | None = None,
    ) -> None:
        self._settings = settings
        self._node_identity = node_identity
        self._event_sink = event_sink
        self._handler: PubsubMessageHandler | None = None
        self._subscribers: PubsubSubscribers | None = None
        self._started = False

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def node_identity(self) -> NodeIdentity:
        if self._node_identity is None:
            raise RuntimeError("node_identity is not initialized")
        return self._node_identity

    @property
    def handler(self) -> PubsubMessageHandler:
        if self._handler is None:
            raise RuntimeError("handler is not initialized")
        return self._handler

    @property
    def subscribers(self) -> PubsubSubscribers:
        if self._subscribers is None:
            raise RuntimeError("subscribers are not initialized")
        return self._subscribers

    def build(self) -> None:
        if self._node_identity is None:
            self._node_identity = NodeIdentity.resolve(
                self._settings.node_identity_host,
                self._settings.node_identity_port,
                timeout_seconds=self._settings.node_identity_timeout_seconds,
            )
        _log("node_identity_resolved", node=self._node_identity.identity)

        self._handler = ProcessingService(
            create_message_lock_store(self._settings),
            self._event_sink or LoggingEventSink(),
        )
        self._subscribers = PubsubSubscribers()
        self._subscribers.put_all(create_subscribers(self._settings, self._handler, self._node_identity))

    def start(self) -> None:
        self.subscribers.start_all()
        self._started = True
        _log("subscribers_started", count=len(self.subscribers))

    def close(self) -> None:
        if self._subscribers is not None:
            try:
                self._subscribers.stop_all(self._settings.stop_timeout_seconds)
            except Exception as exc:
                logger.warning("subscriber shutdown failed: {}", exc)
        self._subscribers = None
        self._handler = None
        self._started = False


def create_subscriber_dependencies(settings: Settings | None = None) -> SubscriberDependencies:
    return SubscriberDependencies(settings=settings or Settings())
