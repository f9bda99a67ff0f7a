"""Type definitions for converge using Python 3.12+ generics."""

from converge.types.protocols import (
    ImageClient,
    NodeClient,
    Refresher,
    Snapshot,
)
from converge.types.snapshot import (
    HostAggregate,
    ImageMetadata,
    NodeMetadata,
)
from converge.types.status import (
    Decision,
    ImageStatus,
    NodeStatus,
)

__all__ = [
    "Decision",
    "HostAggregate",
    "ImageClient",
    "ImageMetadata",
    "ImageStatus",
    "NodeClient",
    "NodeMetadata",
    "NodeStatus",
    "Refresher",
    "Snapshot",
]
