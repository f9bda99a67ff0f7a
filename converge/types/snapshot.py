"""Immutable snapshots of remote resources.

Snapshots are frozen dataclasses. Any mutable container handed to the
constructor is copied into an immutable one, so a snapshot never changes
after it was observed.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from types import MappingProxyType
from typing import Self

from converge.core.exceptions import ConfigurationError
from converge.types.status import ImageStatus, NodeStatus

__all__ = [
    "HostAggregate",
    "ImageMetadata",
    "NodeMetadata",
]


def _freeze_mapping(value: Mapping[str, str] | None) -> Mapping[str, str]:
    return MappingProxyType(dict(value or {}))


def _freeze_seq(value: Iterable[str] | None) -> tuple[str, ...]:
    return tuple(value or ())


class _WithStatus:
    __slots__ = ()

    def with_status(self, status) -> Self:
        return replace(self, status=status)  # type: ignore[type-var]


@dataclass(frozen=True, slots=True)
class NodeMetadata(_WithStatus):
    """What we last observed about a compute node."""

    id: str | None
    status: NodeStatus
    name: str | None = None
    hostname: str | None = None
    public_ips: tuple[str, ...] = ()
    private_ips: tuple[str, ...] = ()
    tags: frozenset[str] = frozenset()
    metadata: Mapping[str, str] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        if not isinstance(self.status, NodeStatus):
            object.__setattr__(self, "status", NodeStatus.parse(self.status))
        object.__setattr__(self, "public_ips", _freeze_seq(self.public_ips))
        object.__setattr__(self, "private_ips", _freeze_seq(self.private_ips))
        object.__setattr__(self, "tags", frozenset(self.tags or ()))
        object.__setattr__(self, "metadata", _freeze_mapping(self.metadata))


@dataclass(frozen=True, slots=True)
class ImageMetadata(_WithStatus):
    """What we last observed about a disk image."""

    id: str | None
    status: ImageStatus
    name: str | None = None
    description: str | None = None
    version: str | None = None
    metadata: Mapping[str, str] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        if not isinstance(self.status, ImageStatus):
            object.__setattr__(self, "status", ImageStatus.parse(self.status))
        object.__setattr__(self, "metadata", _freeze_mapping(self.metadata))


@dataclass(frozen=True, slots=True)
class HostAggregate(_WithStatus):
    """A named group of hosts sharing an availability zone and metadata.

    The status is whatever string the provider reports; aggregates have no
    closed lifecycle enum.
    """

    id: str
    name: str
    status: str | None = None
    availability_zone: str | None = None
    hosts: frozenset[str] = frozenset()
    created: datetime = field(default_factory=lambda: datetime.now(UTC))
    updated: datetime | None = None
    metadata: Mapping[str, str] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        if not self.id:
            raise ConfigurationError("HostAggregate requires an id")
        if not self.name:
            raise ConfigurationError("HostAggregate requires a name")
        object.__setattr__(self, "hosts", frozenset(self.hosts or ()))
        object.__setattr__(self, "metadata", _freeze_mapping(self.metadata))

    @property
    def updated_at(self) -> datetime:
        """Last modification time, falling back to creation time."""
        return self.updated or self.created
