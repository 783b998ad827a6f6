"""Workload resource models: pods, deployments, evictions."""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import Field

from kubeclient.integrations.kubernetes.models.base import (
    KubeModel,
    KubeObject,
    KubeResource,
    KubeResourceList,
    ObjectMeta,
)
from kubeclient.integrations.kubernetes.operations import OperationKind as Op
from kubeclient.integrations.kubernetes.operations import UrlTemplate, url_template


class ContainerV1(KubeModel):
    """A single application container."""

    name: str
    image: str | None = None
    command: list[str] | None = None
    args: list[str] | None = None


class PodSpecV1(KubeModel):
    """Specification of a pod's containers and scheduling."""

    containers: list[ContainerV1] = Field(default_factory=list)
    node_name: str | None = None
    service_account_name: str | None = None
    restart_policy: str | None = None


class PodStatusV1(KubeModel):
    """Most recently observed status of a pod."""

    phase: str | None = None
    reason: str | None = None
    message: str | None = None
    pod_ip: str | None = Field(default=None, alias="podIP")


class PodV1(KubeResource):
    """Pod is a collection of containers that run on a host."""

    kube_kind: ClassVar[str | None] = "Pod"
    kube_api_version: ClassVar[str | None] = "v1"
    kube_apis: ClassVar[tuple[UrlTemplate, ...]] = (
        url_template("api/v1/pods", Op.LIST),
        url_template("api/v1/watch/pods", Op.WATCH_LIST),
        url_template("api/v1/watch/namespaces/{namespace}/pods", Op.WATCH_LIST),
        url_template("api/v1/watch/namespaces/{namespace}/pods/{name}", Op.WATCH),
        url_template(
            "api/v1/namespaces/{namespace}/pods", Op.CREATE, Op.DELETE_COLLECTION, Op.LIST
        ),
        url_template(
            "api/v1/namespaces/{namespace}/pods/{name}", Op.DELETE, Op.GET, Op.PATCH, Op.UPDATE
        ),
        url_template(
            "api/v1/namespaces/{namespace}/pods/{name}/{subresource}", Op.GET, Op.PATCH, Op.UPDATE
        ),
    )

    spec: PodSpecV1 | None = None
    status: PodStatusV1 | None = None


class PodListV1(KubeResourceList[PodV1]):
    """PodList is a list of Pods."""

    kube_kind: ClassVar[str | None] = "PodList"
    kube_api_version: ClassVar[str | None] = "v1"


class DeploymentSpecV1(KubeModel):
    """Desired state of a deployment."""

    replicas: int | None = None
    selector: dict[str, Any] | None = None
    template: dict[str, Any] | None = None
    paused: bool | None = None


class DeploymentStatusV1(KubeModel):
    """Most recently observed status of a deployment."""

    observed_generation: int | None = None
    replicas: int | None = None
    ready_replicas: int | None = None
    updated_replicas: int | None = None
    available_replicas: int | None = None


class DeploymentV1(KubeResource):
    """Deployment enables declarative updates for Pods and ReplicaSets."""

    kube_kind: ClassVar[str | None] = "Deployment"
    kube_api_version: ClassVar[str | None] = "apps/v1"
    kube_apis: ClassVar[tuple[UrlTemplate, ...]] = (
        url_template("apis/apps/v1/deployments", Op.LIST),
        url_template("apis/apps/v1/watch/deployments", Op.WATCH_LIST),
        url_template("apis/apps/v1/watch/namespaces/{namespace}/deployments", Op.WATCH_LIST),
        url_template("apis/apps/v1/watch/namespaces/{namespace}/deployments/{name}", Op.WATCH),
        url_template(
            "apis/apps/v1/namespaces/{namespace}/deployments",
            Op.CREATE,
            Op.DELETE_COLLECTION,
            Op.LIST,
        ),
        url_template(
            "apis/apps/v1/namespaces/{namespace}/deployments/{name}",
            Op.DELETE,
            Op.GET,
            Op.PATCH,
            Op.UPDATE,
        ),
        url_template(
            "apis/apps/v1/namespaces/{namespace}/deployments/{name}/{subresource}",
            Op.GET,
            Op.PATCH,
            Op.UPDATE,
        ),
    )

    spec: DeploymentSpecV1 | None = None
    status: DeploymentStatusV1 | None = None


class DeploymentListV1(KubeResourceList[DeploymentV1]):
    """DeploymentList is a list of Deployments."""

    kube_kind: ClassVar[str | None] = "DeploymentList"
    kube_api_version: ClassVar[str | None] = "apps/v1"


class EvictionV1Beta1(KubeObject):
    """Eviction evicts a pod from its node subject to disruption budgets.

    Created by POSTing to the pod's ``eviction`` subresource.
    """

    kube_kind: ClassVar[str | None] = "Eviction"
    kube_api_version: ClassVar[str | None] = "policy/v1beta1"
    kube_apis: ClassVar[tuple[UrlTemplate, ...]] = (
        url_template("api/v1/namespaces/{namespace}/pods/{name}/eviction", Op.CREATE),
    )

    metadata: ObjectMeta = Field(default_factory=ObjectMeta)
    delete_options: dict[str, Any] | None = None
