"""Base models for Kubernetes API objects.

Resource classes declare their kind, API version and URL templates as class
attributes. The resource registry reads those declarations; nothing here
inspects them on construction.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, ClassVar, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from kubeclient.integrations.kubernetes.operations import UrlTemplate


class KubeModel(BaseModel):
    """Base for API object fragments (camelCase on the wire)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    def to_manifest(self) -> dict[str, Any]:
        """Serialize to the wire representation."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class KubeObject(KubeModel):
    """Base for top-level API objects that carry type metadata."""

    kube_kind: ClassVar[str | None] = None
    kube_api_version: ClassVar[str | None] = None
    kube_apis: ClassVar[tuple[UrlTemplate, ...]] = ()

    kind: str | None = None
    api_version: str | None = None


class OwnerReference(KubeModel):
    """Kubernetes owner reference."""

    api_version: str | None = None
    kind: str | None = None
    name: str | None = None
    uid: str | None = None
    controller: bool | None = None
    block_owner_deletion: bool | None = None


class ObjectMeta(KubeModel):
    """Standard object metadata."""

    name: str | None = None
    generate_name: str | None = None
    namespace: str | None = None
    uid: str | None = None
    resource_version: str | None = None
    generation: int | None = None
    creation_timestamp: datetime | None = None
    deletion_timestamp: datetime | None = None
    labels: dict[str, str] | None = None
    annotations: dict[str, str] | None = None
    owner_references: list[OwnerReference] | None = None
    finalizers: list[str] | None = None


class ListMeta(KubeModel):
    """Metadata for list responses."""

    resource_version: str | None = None
    continue_: str | None = Field(default=None, alias="continue")
    remaining_item_count: int | None = None


class KubeResource(KubeObject):
    """A named API object with standard metadata."""

    metadata: ObjectMeta = Field(default_factory=ObjectMeta)

    @property
    def name(self) -> str | None:
        return self.metadata.name

    @property
    def namespace(self) -> str | None:
        return self.metadata.namespace


ResourceT = TypeVar("ResourceT", bound=KubeResource)


class KubeResourceList(KubeObject, Generic[ResourceT]):
    """A list response holding resources of one type."""

    metadata: ListMeta = Field(default_factory=ListMeta)
    items: list[ResourceT] = Field(default_factory=list)


class StatusCause(KubeModel):
    """A single cause reported in a Status."""

    reason: str | None = None
    message: str | None = None
    field: str | None = None


class StatusDetails(KubeModel):
    """Extended data attached to a Status."""

    name: str | None = None
    group: str | None = None
    kind: str | None = None
    uid: str | None = None
    causes: list[StatusCause] | None = None
    retry_after_seconds: int | None = None


class Status(KubeObject):
    """Result of an operation that does not return an object, and API errors."""

    kube_kind: ClassVar[str | None] = "Status"
    kube_api_version: ClassVar[str | None] = "v1"

    metadata: ListMeta = Field(default_factory=ListMeta)
    status: str | None = None
    message: str | None = None
    reason: str | None = None
    code: int | None = None
    details: StatusDetails | None = None
