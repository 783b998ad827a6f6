"""Storage resource models."""

from __future__ import annotations

from typing import ClassVar

from pydantic import Field

from kubeclient.integrations.kubernetes.models.base import KubeResource, KubeResourceList
from kubeclient.integrations.kubernetes.operations import OperationKind as Op
from kubeclient.integrations.kubernetes.operations import UrlTemplate, url_template


class StorageClassV1(KubeResource):
    """StorageClass describes the parameters for a class of storage.

    Cluster-scoped: no namespace templates.
    """

    kube_kind: ClassVar[str | None] = "StorageClass"
    kube_api_version: ClassVar[str | None] = "storage.k8s.io/v1"
    kube_apis: ClassVar[tuple[UrlTemplate, ...]] = (
        url_template(
            "apis/storage.k8s.io/v1/storageclasses", Op.CREATE, Op.DELETE_COLLECTION, Op.LIST
        ),
        url_template(
            "apis/storage.k8s.io/v1/storageclasses/{name}", Op.DELETE, Op.GET, Op.PATCH, Op.UPDATE
        ),
        url_template("apis/storage.k8s.io/v1/watch/storageclasses", Op.WATCH_LIST),
        url_template("apis/storage.k8s.io/v1/watch/storageclasses/{name}", Op.WATCH),
    )

    provisioner: str
    parameters: dict[str, str] | None = None
    reclaim_policy: str | None = None
    volume_binding_mode: str | None = None
    allow_volume_expansion: bool | None = None
    mount_options: list[str] = Field(default_factory=list)


class StorageClassListV1(KubeResourceList[StorageClassV1]):
    """StorageClassList is a collection of storage classes."""

    kube_kind: ClassVar[str | None] = "StorageClassList"
    kube_api_version: ClassVar[str | None] = "storage.k8s.io/v1"
