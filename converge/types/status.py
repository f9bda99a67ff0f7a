"""Status enums for the resource kinds converge knows about."""

from __future__ import annotations

from enum import StrEnum
from typing import Self

__all__ = [
    "Decision",
    "ImageStatus",
    "NodeStatus",
]


class _ParsableStatus(StrEnum):
    @classmethod
    def parse(cls, raw: str | None) -> Self:
        """Map a provider-reported string onto the enum.

        Unknown values become UNRECOGNIZED instead of raising.
        """
        if raw is None:
            return cls["UNRECOGNIZED"]
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return cls["UNRECOGNIZED"]


# =============================================================================
# Compute Nodes
# =============================================================================


class NodeStatus(_ParsableStatus):
    """Lifecycle status of a compute node."""

    PENDING = "pending"  # in transition
    TERMINATED = "terminated"  # visible, being deleted
    SUSPENDED = "suspended"  # deployed but stopped
    RUNNING = "running"
    ERROR = "error"
    UNRECOGNIZED = "unrecognized"


# =============================================================================
# Disk Images
# =============================================================================


class ImageStatus(_ParsableStatus):
    """Lifecycle status of a disk image."""

    PENDING = "pending"
    DELETED = "deleted"
    AVAILABLE = "available"
    ERROR = "error"
    UNRECOGNIZED = "unrecognized"


class Decision(StrEnum):
    """Outcome of a single predicate evaluation."""

    PASS = "pass"
    FAIL = "fail"
    RETRY = "retry"
