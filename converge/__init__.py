"""converge - wait for remote resources to reach a status.

Example:

    from converge import NodeStatus, WaitConfig, wait_for_node

    node = wait_for_node(
        client,
        node,
        NodeStatus.RUNNING,
        config=WaitConfig(timeout=600, interval=10),
    )
"""

from converge.compute import (
    image_available,
    image_deleted,
    image_status,
    node_running,
    node_status,
    node_suspended,
    node_terminated,
    wait_for_image,
    wait_for_node,
)
from converge.config import load_config, resolve_wait
from converge.core.exceptions import (
    ConfigurationError,
    ConvergeError,
    NotFoundError,
    ResourceFailedError,
    TimeoutError,
    TransportError,
)
from converge.logging import LogConfig, setup_logging, teardown_logging
from converge.predicate import StatusConvergencePredicate
from converge.refresh import FetchRefresher, ImageRefresher, NodeRefresher
from converge.types import (
    Decision,
    HostAggregate,
    ImageClient,
    ImageMetadata,
    ImageStatus,
    NodeClient,
    NodeMetadata,
    NodeStatus,
    Refresher,
    Snapshot,
)
from converge.wait import WaitConfig, wait_for_status

__all__ = [
    # Predicate
    "Decision",
    "StatusConvergencePredicate",
    # Refreshers
    "FetchRefresher",
    "ImageRefresher",
    "NodeRefresher",
    "Refresher",
    # Resources
    "HostAggregate",
    "ImageClient",
    "ImageMetadata",
    "ImageStatus",
    "NodeClient",
    "NodeMetadata",
    "NodeStatus",
    "Snapshot",
    # Waiting
    "WaitConfig",
    "image_available",
    "image_deleted",
    "image_status",
    "node_running",
    "node_status",
    "node_suspended",
    "node_terminated",
    "wait_for_image",
    "wait_for_node",
    "wait_for_status",
    # Configuration
    "LogConfig",
    "load_config",
    "resolve_wait",
    "setup_logging",
    "teardown_logging",
    # Exceptions
    "ConfigurationError",
    "ConvergeError",
    "NotFoundError",
    "ResourceFailedError",
    "TimeoutError",
    "TransportError",
]
