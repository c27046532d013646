"""Unit tests for the single-use acknowledger."""
from __future__ import annotations

import threading

from echo_pubsub.app.application.acknowledger import SingleUseAcknowledger
from tests.fakes import FakeIncomingMessage


def _acknowledger(message: FakeIncomingMessage) -> SingleUseAcknowledger:
    return SingleUseAcknowledger(message.ack, message.nack, message_id=message.message_id)


def test_ack_then_nack_only_first_takes_effect(log_records):
    message = FakeIncomingMessage("{}")
    acknowledger = _acknowledger(message)

    assert acknowledger.ack() is True
    assert acknowledger.nack() is False

    assert message.ack_calls == 1
    assert message.nack_calls == 0
    assert acknowledger.outcome == "ack"
    assert any(r["level"].name == "WARNING" and "already settled with ack" in r["message"] for r in log_records)


def test_nack_then_ack_only_first_takes_effect():
    message = FakeIncomingMessage("{}")
    acknowledger = _acknowledger(message)

    assert acknowledger.nack() is True
    assert acknowledger.ack() is False

    assert message.nack_calls == 1
    assert message.ack_calls == 0
    assert acknowledger.outcome == "nack"


def test_repeated_ack_reaches_broker_once():
    message = FakeIncomingMessage("{}")
    acknowledger = _acknowledger(message)

    results = [acknowledger.ack() for _ in range(3)]

    assert results == [True, False, False]
    assert message.ack_calls == 1


def test_consumed_reflects_first_call():
    acknowledger = _acknowledger(FakeIncomingMessage("{}"))
    assert acknowledger.consumed is False
    acknowledger.nack()
    assert acknowledger.consumed is True


def test_native_ack_error_is_logged_and_acknowledger_consumed(log_records):
    message = FakeIncomingMessage("{}", raise_on_ack=RuntimeError("stream closed"))
    acknowledger = _acknowledger(message)

    assert acknowledger.ack() is False
    assert acknowledger.consumed is True
    assert acknowledger.nack() is False
    assert message.nack_calls == 0
    assert any(r["level"].name == "ERROR" and "stream closed" in r["message"] for r in log_records)


def test_racing_ack_and_nack_settle_exactly_once():
    for _ in range(20):
        message = FakeIncomingMessage("{}")
        acknowledger = _acknowledger(message)
        start = threading.Event()
        results: list[bool] = []
        lock = threading.Lock()

        def settle(call) -> None:
            start.wait()
            outcome = call()
            with lock:
                results.append(outcome)

        threads = [threading.Thread(target=settle, args=(c,)) for c in (acknowledger.ack, acknowledger.nack) * 4]
        for t in threads:
            t.start()
        start.set()
        for t in threads:
            t.join()

        assert results.count(True) == 1
        assert message.ack_calls + message.nack_calls == 1


def test_acknowledger_usable_from_another_thread_after_receipt():
    message = FakeIncomingMessage("{}")
    acknowledger = _acknowledger(message)

    worker = threading.Thread(target=acknowledger.ack)
    worker.start()
    worker.join()

    assert message.ack_calls == 1
