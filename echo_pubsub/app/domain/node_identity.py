"""Identity of this process, used by handlers to attribute message ownership."""
from __future__ import annotations

import os
import socket
from dataclasses import dataclass

from loguru import logger


@dataclass(frozen=True)
class NodeIdentity:
    """Process identity value. Build once at startup and pass it down explicitly."""

    identity: str

    def __post_init__(self) -> None:
        if not isinstance(self.identity, str) or not self.identity:
            raise ValueError("identity must be a non-empty str")

    def __str__(self) -> str:
        return self.identity

    @staticmethod
    def resolve(
        validation_host: str = "www.google.com",
        validation_port: int = 80,
        *,
        timeout_seconds: float = 2.0,
    ) -> "NodeIdentity":
        """Identity of the form `{host}:{pid}@{hostname}`.

        `host` is the local address used to reach `validation_host`, which picks
        the externally routable interface on multi-homed machines. Falls back to
        the hostname when the probe connection cannot be made.
        """
        hostname = socket.gethostname()
        host = _local_address(validation_host, validation_port, timeout_seconds) or hostname
        return NodeIdentity(identity=f"{host}:{os.getpid()}@{hostname}")


def _local_address(host: str, port: int, timeout_seconds: float) -> str | None:
    try:
        with socket.create_connection((host, port), timeout=timeout_seconds) as sock:
            return str(sock.getsockname()[0])
    except OSError as exc:
        logger.warning("node identity probe to {}:{} failed, using hostname: {}", host, port, exc)
        return None
