"""Protocol definitions for converge types."""

from __future__ import annotations

from collections.abc import Hashable
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from converge.types.snapshot import ImageMetadata, NodeMetadata

__all__ = [
    "ImageClient",
    "NodeClient",
    "Refresher",
    "Snapshot",
]


@runtime_checkable
class Snapshot(Protocol):
    """A point-in-time observation of a resource.

    Only ``id`` and ``status`` are read by the poller; everything else
    belongs to the resource kind.
    """

    @property
    def id(self) -> str | None: ...

    @property
    def status(self) -> Hashable: ...


class Refresher[R: Snapshot](Protocol):
    """Re-fetches a resource's current snapshot by identity.

    Returns None when the identity no longer resolves. Raises
    TransportError when the round trip itself fails.
    """

    def refresh(self, identity: str) -> R | None: ...


class NodeClient(Protocol):
    """The slice of a compute API needed to refresh nodes."""

    def get_node(self, node_id: str) -> NodeMetadata | None: ...


class ImageClient(Protocol):
    """The slice of a compute API needed to refresh images."""

    def get_image(self, image_id: str) -> ImageMetadata | None: ...
