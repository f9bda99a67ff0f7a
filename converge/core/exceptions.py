"""Custom exception hierarchy for converge.

All converge-specific exceptions inherit from ConvergeError, enabling
users to catch all converge exceptions with a single except clause.
"""

from __future__ import annotations

from typing import Any


class ConvergeError(Exception):
    """Base exception for all converge errors."""


class ConfigurationError(ConvergeError):
    """Raised for invalid configuration or missing required settings."""


class NotFoundError(ConvergeError):
    """Raised by clients when an identity no longer resolves to a resource."""

    def __init__(self, identity: str) -> None:
        self.identity = identity
        super().__init__(f"Resource {identity} not found")


class TransportError(ConvergeError):
    """Raised when a round trip to the remote API could not complete.

    Covers timeouts, auth failures and malformed responses. It says
    nothing about the resource itself, so it must never be read as failure.
    """

    def __init__(self, identity: str, reason: str = "unknown") -> None:
        self.identity = identity
        self.reason = reason
        super().__init__(f"Failed to fetch {identity}: {reason}")


class ResourceFailedError(ConvergeError):
    """Raised when a resource reaches a status from which the target is unreachable."""

    def __init__(self, snapshot: Any, reason: str = "invalid status") -> None:
        self.snapshot = snapshot
        self.reason = reason
        identity = getattr(snapshot, "id", None)
        status = getattr(snapshot, "status", None)
        super().__init__(f"Resource {identity} failed ({reason}): status={status}")


class TimeoutError(ConvergeError):  # noqa: A001
    """Raised when a wait exceeds its timeout."""

    def __init__(self, message: str, snapshot: Any = None) -> None:
        self.snapshot = snapshot
        super().__init__(message)
