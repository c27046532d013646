"""Fakes shared by unit tests. Each implements the matching port."""
from __future__ import annotations

import threading
from typing import Any

from echo_pubsub.app.domain.models import Artifact, MessageDescription


class FakeIncomingMessage:
    """Implements IncomingMessage for tests; counts native ack/nack calls."""

    def __init__(
        self,
        data: bytes | str,
        *,
        message_id: str | None = "m-1",
        attributes: dict[str, str] | None = None,
        raise_on_ack: Exception | None = None,
    ) -> None:
        self.data = data.encode() if isinstance(data, str) else data
        self.message_id = message_id
        self.attributes = attributes or {}
        self.ack_calls = 0
        self.nack_calls = 0
        self._raise_on_ack = raise_on_ack
        self._lock = threading.Lock()

    def ack(self) -> None:
        with self._lock:
            self.ack_calls += 1
        if self._raise_on_ack is not None:
            raise self._raise_on_ack

    def nack(self) -> None:
        with self._lock:
            self.nack_calls += 1


class CapturingHandler:
    """Implements PubsubMessageHandler; records every invocation."""

    def __init__(self, *, raise_on_handle: Exception | None = None) -> None:
        self.calls: list[tuple[MessageDescription, Any, str]] = []
        self._raise_on_handle = raise_on_handle
        self._lock = threading.Lock()

    def handle_message(self, description: MessageDescription, acknowledger: Any, node_identity: str) -> None:
        with self._lock:
            self.calls.append((description, acknowledger, node_identity))
        if self._raise_on_handle is not None:
            raise self._raise_on_handle


class StaticTranslator:
    def __init__(self, artifacts: frozenset[Artifact] = frozenset()) -> None:
        self._artifacts = artifacts

    def parse_artifacts(self, message_payload: str) -> frozenset[Artifact]:
        return self._artifacts


class FailingTranslator:
    def parse_artifacts(self, message_payload: str) -> frozenset[Artifact]:
        raise ValueError("cannot parse payload")


class FakeStreamingPullFuture:
    """Mimics StreamingPullFuture: cancel() completes it as cancelled, errors complete it with an exception."""

    def __init__(self) -> None:
        self._callbacks: list = []
        self._done = False
        self._exception: BaseException | None = None
        self._cancelled = False
        self.cancel_calls = 0

    def add_done_callback(self, callback) -> None:
        if self._done:
            callback(self)
        else:
            self._callbacks.append(callback)

    def _complete(self, exception: BaseException | None) -> None:
        if self._done:
            return
        self._done = True
        self._exception = exception
        for callback in self._callbacks:
            callback(self)

    def fail(self, exception: BaseException) -> None:
        self._complete(exception)

    def cancel(self) -> bool:
        self.cancel_calls += 1
        if not self._done:
            self._cancelled = True
        self._complete(None)
        return True

    def cancelled(self) -> bool:
        return self._cancelled

    def done(self) -> bool:
        return self._done

    def exception(self, timeout: float | None = None) -> BaseException | None:
        return self._exception

    def result(self, timeout: float | None = None) -> bool:
        if self._exception is not None:
            raise self._exception
        return True


class FakeSubscriberClient:
    """Stands in for pubsub_v1.SubscriberClient."""

    def __init__(self, credentials: Any = None, *, raise_on_subscribe: Exception | None = None) -> None:
        self.credentials = credentials
        self.future = FakeStreamingPullFuture()
        self.subscribe_calls: list[dict[str, Any]] = []
        self.close_calls = 0
        self._raise_on_subscribe = raise_on_subscribe

    def subscribe(self, subscription: str, callback, flow_control=None) -> FakeStreamingPullFuture:
        self.subscribe_calls.append({"subscription": subscription, "callback": callback, "flow_control": flow_control})
        if self._raise_on_subscribe is not None:
            raise self._raise_on_subscribe
        return self.future

    def close(self) -> None:
        self.close_calls += 1


class RecordingListener:
    """SubscriptionListener that records every hook call."""

    def __init__(self) -> None:
        self.events: list[tuple] = []

    def starting(self) -> None:
        self.events.append(("starting",))

    def running(self) -> None:
        self.events.append(("running",))

    def stopping(self, previous) -> None:
        self.events.append(("stopping", previous))

    def terminated(self, previous) -> None:
        self.events.append(("terminated", previous))

    def failed(self, previous, failure) -> None:
        self.events.append(("failed", previous, failure))
