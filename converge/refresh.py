"""Refreshers: re-fetch a resource's snapshot by identity.

A refresher turns whatever a client does on "not found" into ``None`` and
whatever it does on a failed round trip into ``TransportError``. The
predicate relies on that split to tell a deleted resource from a network
blip.
"""

from __future__ import annotations

from collections.abc import Callable

from loguru import logger

from converge.core.exceptions import NotFoundError, TransportError
from converge.types.protocols import ImageClient, NodeClient, Snapshot
from converge.types.snapshot import ImageMetadata, NodeMetadata

__all__ = [
    "FetchRefresher",
    "ImageRefresher",
    "NodeRefresher",
]

type Fetch[R] = Callable[[str], R | None]

# Failed round trips: socket errors and timeouts (OSError), garbled bodies
# (ValueError, which covers json.JSONDecodeError).
DEFAULT_TRANSIENT: tuple[type[Exception], ...] = (OSError, ValueError)


class FetchRefresher[R: Snapshot]:
    """Adapts a ``fetch_by_identity`` callable into a Refresher.

    Args:
        fetch: Single round trip to the source of truth for the resource.
        transient: Exception types that mean the round trip failed. They are
            re-raised as TransportError. Anything else propagates unchanged.
    """

    def __init__(
        self,
        fetch: Fetch[R],
        *,
        transient: tuple[type[Exception], ...] = DEFAULT_TRANSIENT,
    ) -> None:
        self._fetch = fetch
        self._transient = transient

    def refresh(self, identity: str) -> R | None:
        if not identity:
            return None

        log = logger.bind(component="refresher", resource_id=identity)
        try:
            snapshot = self._fetch(identity)
        except NotFoundError:
            log.debug("Resource not found")
            return None
        except TransportError:
            raise
        except self._transient as e:
            raise TransportError(identity, f"{type(e).__name__}: {e}") from e

        if snapshot is None:
            log.debug("Resource not found")
        return snapshot


class NodeRefresher(FetchRefresher[NodeMetadata]):
    """Refreshes compute nodes through ``NodeClient.get_node``."""

    def __init__(
        self,
        client: NodeClient,
        *,
        transient: tuple[type[Exception], ...] = DEFAULT_TRANSIENT,
    ) -> None:
        super().__init__(client.get_node, transient=transient)
        self.client = client


class ImageRefresher(FetchRefresher[ImageMetadata]):
    """Refreshes disk images through ``ImageClient.get_image``."""

    def __init__(
        self,
        client: ImageClient,
        *,
        transient: tuple[type[Exception], ...] = DEFAULT_TRANSIENT,
    ) -> None:
        super().__init__(client.get_image, transient=transient)
        self.client = client
