"""Kubernetes API object models."""

from kubeclient.integrations.kubernetes.models.base import (
    KubeModel,
    KubeObject,
    KubeResource,
    KubeResourceList,
    ListMeta,
    ObjectMeta,
    OwnerReference,
    Status,
    StatusCause,
    StatusDetails,
)
from kubeclient.integrations.kubernetes.models.configuration import (
    ConfigMapListV1,
    ConfigMapV1,
    NamespaceV1,
)
from kubeclient.integrations.kubernetes.models.rbac import (
    ClusterRoleV1Beta1,
    PolicyRuleV1Beta1,
    RoleBindingListV1Beta1,
    RoleBindingV1Beta1,
    RoleListV1Beta1,
    RoleRefV1Beta1,
    RoleV1Beta1,
    SubjectV1Beta1,
)
from kubeclient.integrations.kubernetes.models.storage import (
    StorageClassListV1,
    StorageClassV1,
)
from kubeclient.integrations.kubernetes.models.workloads import (
    ContainerV1,
    DeploymentListV1,
    DeploymentV1,
    EvictionV1Beta1,
    PodListV1,
    PodV1,
)

# Resource types addressable by kind name (e.g. from the CLI).
BUNDLED_RESOURCES: dict[str, type[KubeObject]] = {
    model.kube_kind.lower(): model
    for model in (
        ClusterRoleV1Beta1,
        ConfigMapV1,
        DeploymentV1,
        EvictionV1Beta1,
        NamespaceV1,
        PodV1,
        RoleBindingV1Beta1,
        RoleV1Beta1,
        StorageClassV1,
    )
    if model.kube_kind
}

__all__ = [
    "BUNDLED_RESOURCES",
    "ClusterRoleV1Beta1",
    "ConfigMapListV1",
    "ConfigMapV1",
    "ContainerV1",
    "DeploymentListV1",
    "DeploymentV1",
    "EvictionV1Beta1",
    "KubeModel",
    "KubeObject",
    "KubeResource",
    "KubeResourceList",
    "ListMeta",
    "NamespaceV1",
    "ObjectMeta",
    "OwnerReference",
    "PodListV1",
    "PodV1",
    "PolicyRuleV1Beta1",
    "RoleBindingListV1Beta1",
    "RoleBindingV1Beta1",
    "RoleListV1Beta1",
    "RoleRefV1Beta1",
    "RoleV1Beta1",
    "Status",
    "StatusCause",
    "StatusDetails",
    "StorageClassListV1",
    "StorageClassV1",
    "SubjectV1Beta1",
]
