"""Configuration resource models: config maps and namespaces."""

from __future__ import annotations

from typing import ClassVar

from kubeclient.integrations.kubernetes.models.base import KubeModel, KubeResource, KubeResourceList
from kubeclient.integrations.kubernetes.operations import OperationKind as Op
from kubeclient.integrations.kubernetes.operations import UrlTemplate, url_template


class ConfigMapV1(KubeResource):
    """ConfigMap holds configuration data for pods to consume."""

    kube_kind: ClassVar[str | None] = "ConfigMap"
    kube_api_version: ClassVar[str | None] = "v1"
    kube_apis: ClassVar[tuple[UrlTemplate, ...]] = (
        url_template("api/v1/configmaps", Op.LIST),
        url_template("api/v1/watch/configmaps", Op.WATCH_LIST),
        url_template("api/v1/watch/namespaces/{namespace}/configmaps", Op.WATCH_LIST),
        url_template("api/v1/watch/namespaces/{namespace}/configmaps/{name}", Op.WATCH),
        url_template(
            "api/v1/namespaces/{namespace}/configmaps", Op.CREATE, Op.DELETE_COLLECTION, Op.LIST
        ),
        url_template(
            "api/v1/namespaces/{namespace}/configmaps/{name}",
            Op.DELETE,
            Op.GET,
            Op.PATCH,
            Op.UPDATE,
        ),
    )

    data: dict[str, str] | None = None
    binary_data: dict[str, str] | None = None


class ConfigMapListV1(KubeResourceList[ConfigMapV1]):
    """ConfigMapList is a list of ConfigMaps."""

    kube_kind: ClassVar[str | None] = "ConfigMapList"
    kube_api_version: ClassVar[str | None] = "v1"


class NamespaceStatusV1(KubeModel):
    """Observed state of a namespace."""

    phase: str | None = None


class NamespaceV1(KubeResource):
    """Namespace provides a scope for names."""

    kube_kind: ClassVar[str | None] = "Namespace"
    kube_api_version: ClassVar[str | None] = "v1"
    kube_apis: ClassVar[tuple[UrlTemplate, ...]] = (
        url_template("api/v1/namespaces", Op.CREATE, Op.LIST),
        url_template("api/v1/namespaces/{name}", Op.DELETE, Op.GET, Op.PATCH, Op.UPDATE),
        url_template("api/v1/namespaces/{name}/{subresource}", Op.GET, Op.PATCH, Op.UPDATE),
        url_template("api/v1/watch/namespaces", Op.WATCH_LIST),
        url_template("api/v1/watch/namespaces/{name}", Op.WATCH),
    )

    status: NamespaceStatusV1 | None = None
