"""
Google Pub/Sub subscriber: owns the streaming pull for one subscription.

Lifecycle:
  NEW -> STARTING -> RUNNING -> STOPPING -> TERMINATED.
  A subscribe error, or the streaming pull future completing with an
  exception, moves the subscriber to FAILED. TERMINATED and FAILED are final;
  listeners see each transition once.

Concurrency:
  - The client library calls the receiver from its own thread pool.
  - The streaming pull future's done callback runs on a client thread; the
    state lock makes the FAILED/TERMINATED transition race with stop() safe.
  - Listeners are notified outside the state lock.
"""
from __future__ import annotations

import threading
from typing import Any, Callable, Iterable

from google.cloud import pubsub_v1
from google.cloud.pubsub_v1.subscriber.futures import StreamingPullFuture
from google.cloud.pubsub_v1.subscriber.message import Message as GooglePubsubMessage
from loguru import logger

from echo_pubsub.app.application.failure_listener import SubscriptionFailureListener, SubscriptionListener
from echo_pubsub.app.application.message_receiver import MessageReceiver
from echo_pubsub.app.constants import TERMINAL_STATES, PubsubType, SubscriptionState
from echo_pubsub.app.core import SERVICE_NAME
from echo_pubsub.app.domain.artifact_translator import MessageArtifactTranslator
from echo_pubsub.app.infrastructure.messaging.google.constants import (
    EXPLICIT_CREDENTIALS_MAX_LEASE_SECONDS,
    format_subscription_name,
)
from echo_pubsub.app.infrastructure.messaging.google.credentials import load_credentials
from echo_pubsub.app.infrastructure.messaging.google.google_message_adapter import GooglePubsubMessageAdapter
from echo_pubsub.app.ports.message_handler import PubsubMessageHandler


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


class GooglePubsubSubscriber:
    """PubsubSubscriber implementation for Google Cloud Pub/Sub."""

    _pubsub_type = PubsubType.GOOGLE

    def __init__(
        self,
        name: str,
        project: str,
        client: Any,
        receiver: MessageReceiver,
        failure_listener: SubscriptionListener,
        *,
        flow_control: pubsub_v1.types.FlowControl | None = None,
    ) -> None:
        self._subscription_name = format_subscription_name(project, name)
        self._client = client
        self._receiver = receiver
        self._listeners: tuple[SubscriptionListener, ...] = (failure_listener,)
        self._flow_control = flow_control or pubsub_v1.types.FlowControl()
        self._lock = threading.Lock()
        self._state = SubscriptionState.NEW
        self._future: StreamingPullFuture | None = None
        self._client_closed = False

    def pubsub_type(self) -> PubsubType:
        return self._pubsub_type

    def subscription_name(self) -> str:
        return self._subscription_name

    @property
    def state(self) -> SubscriptionState:
        with self._lock:
            return self._state

    @property
    def flow_control(self) -> pubsub_v1.types.FlowControl:
        return self._flow_control

    @property
    def receiver(self) -> MessageReceiver:
        return self._receiver

    @property
    def listeners(self) -> tuple[SubscriptionListener, ...]:
        return self._listeners

    @classmethod
    def build_subscriber(
        cls,
        name: str,
        project: str,
        json_path: str | None,
        ack_deadline_seconds: int,
        handler: PubsubMessageHandler,
        template_path: str | None,
        node_identity: str,
        *,
        credentials_strict: bool = True,
        client_factory: Callable[..., Any] = pubsub_v1.SubscriberClient,
    ) -> "GooglePubsubSubscriber":
        subscription_name = format_subscription_name(project, name)
        receiver = MessageReceiver(
            subscription_name=subscription_name,
            pubsub_type=cls._pubsub_type,
            ack_deadline_seconds=ack_deadline_seconds,
            handler=handler,
            artifact_translator=MessageArtifactTranslator(template_path),
            node_identity=str(node_identity),
        )

        if json_path:
            credentials = load_credentials(json_path, strict=credentials_strict)
            client = client_factory(credentials=credentials)
            flow_control = pubsub_v1.types.FlowControl(
                max_lease_duration=EXPLICIT_CREDENTIALS_MAX_LEASE_SECONDS,
            )
        else:
            client = client_factory()
            flow_control = pubsub_v1.types.FlowControl()

        return cls(
            name,
            project,
            client,
            receiver,
            SubscriptionFailureListener(subscription_name),
            flow_control=flow_control,
        )

    def _on_message(self, message: GooglePubsubMessage) -> None:
        self._receiver(GooglePubsubMessageAdapter(message))

    def start(self) -> None:
        if not self._transition(SubscriptionState.STARTING, allowed_from=(SubscriptionState.NEW,)):
            raise RuntimeError(f"subscriber {self._subscription_name} already started")
        _log("subscriber_starting", subscription=self._subscription_name)
        try:
            future = self._client.subscribe(
                self._subscription_name,
                callback=self._on_message,
                flow_control=self._flow_control,
            )
        except Exception as exc:
            self._transition(SubscriptionState.FAILED, failure=exc)
            raise
        with self._lock:
            self._future = future
        self._transition(SubscriptionState.RUNNING, allowed_from=(SubscriptionState.STARTING,))
        future.add_done_callback(self._on_streaming_pull_done)
        _log("subscriber_running", subscription=self._subscription_name)

    def _on_streaming_pull_done(self, future: StreamingPullFuture) -> None:
        if future.cancelled():
            self._transition(SubscriptionState.TERMINATED)
            return
        failure = future.exception()
        if failure is None:
            self._transition(SubscriptionState.TERMINATED)
        else:
            self._transition(SubscriptionState.FAILED, failure=failure)

    def stop(self, timeout: float | None = None) -> None:
        with self._lock:
            state = self._state
            future = self._future
        if state not in TERMINAL_STATES:
            if future is not None and self._transition(SubscriptionState.STOPPING):
                future.cancel()
                try:
                    future.result(timeout=timeout)
                except Exception as exc:
                    logger.warning("streaming pull for {} ended with error: {}", self._subscription_name, exc)
            self._transition(SubscriptionState.TERMINATED)
        self._close_client()
        _log("subscriber_stopped", subscription=self._subscription_name, state=self.state.value)

    def _close_client(self) -> None:
        with self._lock:
            if self._client_closed:
                return
            self._client_closed = True
        close = getattr(self._client, "close", None)
        if callable(close):
            try:
                close()
            except Exception as exc:
                logger.warning("subscriber client close failed: {}", exc)

    def _transition(
        self,
        new_state: SubscriptionState,
        *,
        failure: BaseException | None = None,
        allowed_from: Iterable[SubscriptionState] | None = None,
    ) -> bool:
        with self._lock:
            previous = self._state
            if previous in TERMINAL_STATES or previous == new_state:
                return False
            if allowed_from is not None and previous not in allowed_from:
                return False
            self._state = new_state
        for listener in self._listeners:
            try:
                self._notify(listener, previous, new_state, failure)
            except Exception as exc:
                logger.warning("subscription listener {} failed: {}", listener, exc)
        return True

    @staticmethod
    def _notify(
        listener: SubscriptionListener,
        previous: SubscriptionState,
        new_state: SubscriptionState,
        failure: BaseException | None,
    ) -> None:
        if new_state == SubscriptionState.STARTING:
            listener.starting()
        elif new_state == SubscriptionState.RUNNING:
            listener.running()
        elif new_state == SubscriptionState.STOPPING:
            listener.stopping(previous)
        elif new_state == SubscriptionState.TERMINATED:
            listener.terminated(previous)
        elif new_state == SubscriptionState.FAILED:
            listener.failed(previous, failure if failure is not None else RuntimeError("unknown failure"))

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(subscription={self._subscription_name!r}, state={self._state.value!r})"
