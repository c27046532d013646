"""Domain models."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from echo_pubsub.app.constants import PubsubType


@dataclass(frozen=True)
class Artifact:
    """Reference to an external artifact carried in a message payload.

    `metadata` does not take part in equality or hashing so artifacts can be
    collected into sets.
    """

    type: str | None = None
    name: str | None = None
    version: str | None = None
    location: str | None = None
    reference: str | None = None
    artifact_account: str | None = None
    provenance: str | None = None
    uuid: str | None = None
    metadata: Mapping[str, Any] = field(default_factory=dict, compare=False)

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> "Artifact":
        if not isinstance(data, Mapping):
            raise TypeError("artifact must be an object")

        def _str(key: str, *aliases: str) -> str | None:
            for k in (key, *aliases):
                value = data.get(k)
                if value is not None:
                    return str(value)
            return None

        metadata = data.get("metadata") or {}
        if not isinstance(metadata, Mapping):
            raise TypeError("artifact.metadata must be an object")
        return Artifact(
            type=_str("type"),
            name=_str("name"),
            version=_str("version"),
            location=_str("location"),
            reference=_str("reference"),
            artifact_account=_str("artifact_account", "artifactAccount"),
            provenance=_str("provenance"),
            uuid=_str("uuid"),
            metadata=dict(metadata),
        )


@dataclass(frozen=True)
class MessageDescription:
    """Normalized view of one delivered message (value object)."""

    subscription_name: str
    message_payload: str
    pubsub_type: PubsubType
    ack_deadline_millis: int
    retention_deadline_millis: int
    artifacts: frozenset[Artifact] = frozenset()
    message_id: str | None = None
    message_attributes: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.subscription_name, str) or not self.subscription_name:
            raise ValueError("subscription_name must be a non-empty str")
        if self.ack_deadline_millis <= 0:
            raise ValueError("ack_deadline_millis must be positive")
        if self.retention_deadline_millis <= self.ack_deadline_millis:
            raise ValueError("retention_deadline_millis must exceed ack_deadline_millis")
