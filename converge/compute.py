"""Ready-made predicates and waits for compute nodes and disk images.

Example:
    from converge.compute import node_running, wait_for_node

    node = wait_for_node(client, node, NodeStatus.RUNNING)
"""

from __future__ import annotations

from collections.abc import Iterable

from converge.predicate import StatusConvergencePredicate
from converge.refresh import ImageRefresher, NodeRefresher
from converge.types.protocols import ImageClient, NodeClient
from converge.types.snapshot import ImageMetadata, NodeMetadata
from converge.types.status import ImageStatus, NodeStatus
from converge.wait import WaitConfig, wait_for_status

__all__ = [
    "image_available",
    "image_deleted",
    "image_status",
    "node_running",
    "node_status",
    "node_suspended",
    "node_terminated",
    "wait_for_image",
    "wait_for_node",
]

type NodePredicate = StatusConvergencePredicate[NodeStatus, NodeMetadata]
type ImagePredicate = StatusConvergencePredicate[ImageStatus, ImageMetadata]

DEFAULT_NODE_INVALID: frozenset[NodeStatus] = frozenset({NodeStatus.ERROR})
DEFAULT_IMAGE_INVALID: frozenset[ImageStatus] = frozenset({ImageStatus.ERROR})


# =============================================================================
# Nodes
# =============================================================================


def node_status(
    client: NodeClient,
    target: NodeStatus,
    *,
    invalid: Iterable[NodeStatus] = DEFAULT_NODE_INVALID,
    seed: NodeMetadata | None = None,
) -> NodePredicate:
    return StatusConvergencePredicate(target, NodeRefresher(client), invalid, seed=seed)


def node_running(client: NodeClient, seed: NodeMetadata | None = None) -> NodePredicate:
    """A running node can no longer get there once it errored or terminated."""
    return node_status(
        client,
        NodeStatus.RUNNING,
        invalid={NodeStatus.ERROR, NodeStatus.TERMINATED},
        seed=seed,
    )


def node_suspended(client: NodeClient, seed: NodeMetadata | None = None) -> NodePredicate:
    return node_status(
        client,
        NodeStatus.SUSPENDED,
        invalid={NodeStatus.ERROR, NodeStatus.TERMINATED},
        seed=seed,
    )


def node_terminated(client: NodeClient, seed: NodeMetadata | None = None) -> NodePredicate:
    return node_status(client, NodeStatus.TERMINATED, seed=seed)


def wait_for_node(
    client: NodeClient,
    node: NodeMetadata,
    target: NodeStatus,
    *,
    invalid: Iterable[NodeStatus] = DEFAULT_NODE_INVALID,
    config: WaitConfig | None = None,
) -> NodeMetadata:
    """Wait for ``node`` to reach ``target`` and return its final snapshot."""
    predicate = node_status(client, target, invalid=invalid, seed=node)
    return wait_for_status(predicate, node, config=config, description=f"node {node.id}")


# =============================================================================
# Images
# =============================================================================


def image_status(
    client: ImageClient,
    target: ImageStatus,
    *,
    invalid: Iterable[ImageStatus] = DEFAULT_IMAGE_INVALID,
    seed: ImageMetadata | None = None,
) -> ImagePredicate:
    return StatusConvergencePredicate(target, ImageRefresher(client), invalid, seed=seed)


def image_available(client: ImageClient, seed: ImageMetadata | None = None) -> ImagePredicate:
    return image_status(
        client,
        ImageStatus.AVAILABLE,
        invalid={ImageStatus.ERROR, ImageStatus.DELETED},
        seed=seed,
    )


def image_deleted(client: ImageClient, seed: ImageMetadata | None = None) -> ImagePredicate:
    return image_status(client, ImageStatus.DELETED, seed=seed)


def wait_for_image(
    client: ImageClient,
    image: ImageMetadata,
    target: ImageStatus,
    *,
    invalid: Iterable[ImageStatus] = DEFAULT_IMAGE_INVALID,
    config: WaitConfig | None = None,
) -> ImageMetadata:
    """Wait for ``image`` to reach ``target`` and return its final snapshot."""
    predicate = image_status(client, target, invalid=invalid, seed=image)
    return wait_for_status(predicate, image, config=config, description=f"image {image.id}")
