"""Subscriber-level constants shared across modules."""
from __future__ import annotations

from datetime import timedelta
from enum import Enum


class PubsubType(str, Enum):
    GOOGLE = "GOOGLE"
    AMAZON = "AMAZON"


class SubscriptionState(str, Enum):
    NEW = "NEW"
    STARTING = "STARTING"
    RUNNING = "RUNNING"
    STOPPING = "STOPPING"
    TERMINATED = "TERMINATED"
    FAILED = "FAILED"


TERMINAL_STATES = frozenset({SubscriptionState.TERMINATED, SubscriptionState.FAILED})

# Upper bound on handler processing time, relative to the broker's ack deadline.
ACK_DEADLINE_MULTIPLIER = 5

# Dedup records expire after the broker's maximum retention time.
RETENTION_DEADLINE_MILLIS = int(timedelta(days=7).total_seconds() * 1000)
