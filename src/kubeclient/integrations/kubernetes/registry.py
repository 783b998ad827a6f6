"""Resource metadata registry.

Maps a resource's runtime type to its kind, API version and URL templates.
Descriptors are computed from the type's class-level declarations the first
time they are requested and cached for the life of the registry; they are
never evicted.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any, TypeVar

import structlog

from kubeclient.integrations.kubernetes.models.base import KubeObject
from kubeclient.integrations.kubernetes.operations import OperationKind, UrlTemplate

logger = structlog.get_logger()

ObjectT = TypeVar("ObjectT", bound=KubeObject)


@dataclass(frozen=True)
class ResourceDescriptor:
    """Declared type metadata and URL templates for one resource type.

    ``kind`` and ``api_version`` are None for types that declare no metadata.
    """

    kind: str | None = None
    api_version: str | None = None
    templates: tuple[UrlTemplate, ...] = ()

    @property
    def operations(self) -> frozenset[OperationKind]:
        """Every operation served by at least one template."""
        return frozenset(op for template in self.templates for op in template.operations)

    def templates_for(self, operation: OperationKind) -> tuple[UrlTemplate, ...]:
        """Templates serving an operation, in declaration order."""
        return tuple(t for t in self.templates if t.serves(operation))

    def supports(self, operation: OperationKind) -> bool:
        """Whether any template serves an operation."""
        return any(t.serves(operation) for t in self.templates)


def describe(resource_type: type) -> ResourceDescriptor:
    """Compute a descriptor from a type's ``kube_*`` class attributes."""
    return ResourceDescriptor(
        kind=getattr(resource_type, "kube_kind", None),
        api_version=getattr(resource_type, "kube_api_version", None),
        templates=tuple(getattr(resource_type, "kube_apis", ())),
    )


class ResourceRegistry:
    """Memoizing lookup from resource type to ResourceDescriptor.

    Safe for concurrent use. Lookups of cached types take no lock; the lock is
    held only to insert, never while a descriptor is computed, so concurrent
    first lookups of one type may both compute it and converge on whichever
    was inserted first.

    Example:
        ```python
        registry = ResourceRegistry()
        descriptor = registry.descriptor_for(RoleV1Beta1)
        descriptor.kind  # "Role"
        ```
    """

    def __init__(self) -> None:
        """Initialize an empty registry."""
        self._descriptors: dict[type, ResourceDescriptor] = {}
        self._lock = threading.Lock()

    def descriptor_for(self, resource_type: type) -> ResourceDescriptor:
        """Return the descriptor for a resource type, computing it on first use."""
        descriptor = self._descriptors.get(resource_type)
        if descriptor is not None:
            return descriptor

        computed = describe(resource_type)
        with self._lock:
            descriptor = self._descriptors.setdefault(resource_type, computed)

        if descriptor.kind is None:
            logger.debug("resource_type_without_metadata", resource_type=resource_type.__name__)
        else:
            logger.debug(
                "resource_descriptor_cached",
                resource_type=resource_type.__name__,
                kind=descriptor.kind,
                api_version=descriptor.api_version,
            )
        return descriptor

    def register(self, resource_type: type, descriptor: ResourceDescriptor) -> None:
        """Explicitly register (or replace) the descriptor for a type."""
        with self._lock:
            self._descriptors[resource_type] = descriptor
        logger.debug(
            "resource_descriptor_registered",
            resource_type=resource_type.__name__,
            kind=descriptor.kind,
        )

    def __contains__(self, resource_type: object) -> bool:
        return resource_type in self._descriptors

    def __len__(self) -> int:
        return len(self._descriptors)


_default_registry = ResourceRegistry()


def default_registry() -> ResourceRegistry:
    """Return the process-wide registry."""
    return _default_registry


def new_resource(
    resource_type: type[ObjectT],
    registry: ResourceRegistry | None = None,
    **fields: Any,
) -> ObjectT:
    """Construct a resource with ``kind`` and ``apiVersion`` filled from the registry.

    Example:
        >>> role = new_resource(RoleV1Beta1, metadata={"name": "reader"})
        >>> role.kind
        'Role'
    """
    descriptor = (registry or default_registry()).descriptor_for(resource_type)
    type_meta = {"kind": descriptor.kind, "api_version": descriptor.api_version}
    return resource_type(**{**fields, **type_meta})


def strip_type_meta(resource: ObjectT | None) -> ObjectT | None:
    """Return a copy of a resource with ``kind`` and ``apiVersion`` cleared.

    Used when embedding a resource in a list, where type metadata is carried
    by the list. Accepts None and returns it unchanged.
    """
    if resource is None:
        return None
    return resource.model_copy(update={"kind": None, "api_version": None})
