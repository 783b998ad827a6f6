"""RBAC resource models (rbac.authorization.k8s.io/v1beta1)."""

from __future__ import annotations

from typing import ClassVar

from pydantic import Field

from kubeclient.integrations.kubernetes.models.base import KubeModel, KubeResource, KubeResourceList
from kubeclient.integrations.kubernetes.operations import OperationKind as Op
from kubeclient.integrations.kubernetes.operations import UrlTemplate, url_template

_GROUP = "apis/rbac.authorization.k8s.io/v1beta1"


class PolicyRuleV1Beta1(KubeModel):
    """A set of verbs allowed on a set of resources."""

    verbs: list[str] = Field(default_factory=list)
    api_groups: list[str] | None = None
    resources: list[str] | None = None
    resource_names: list[str] | None = None
    non_resource_urls: list[str] | None = Field(default=None, alias="nonResourceURLs")


class RoleRefV1Beta1(KubeModel):
    """Reference to the role a binding grants."""

    api_group: str
    kind: str
    name: str


class SubjectV1Beta1(KubeModel):
    """A user, group or service account a binding applies to."""

    kind: str
    name: str
    api_group: str | None = None
    namespace: str | None = None


class RoleV1Beta1(KubeResource):
    """Role is a namespaced, logical grouping of PolicyRules."""

    kube_kind: ClassVar[str | None] = "Role"
    kube_api_version: ClassVar[str | None] = "rbac.authorization.k8s.io/v1beta1"
    kube_apis: ClassVar[tuple[UrlTemplate, ...]] = (
        url_template(f"{_GROUP}/roles", Op.LIST),
        url_template(f"{_GROUP}/watch/roles", Op.WATCH_LIST),
        url_template(f"{_GROUP}/watch/namespaces/{{namespace}}/roles", Op.WATCH_LIST),
        url_template(f"{_GROUP}/watch/namespaces/{{namespace}}/roles/{{name}}", Op.WATCH),
        url_template(
            f"{_GROUP}/namespaces/{{namespace}}/roles",
            Op.CREATE,
            Op.DELETE_COLLECTION,
            Op.LIST,
        ),
        url_template(
            f"{_GROUP}/namespaces/{{namespace}}/roles/{{name}}",
            Op.DELETE,
            Op.GET,
            Op.PATCH,
            Op.UPDATE,
        ),
    )

    rules: list[PolicyRuleV1Beta1] = Field(default_factory=list)


class RoleListV1Beta1(KubeResourceList[RoleV1Beta1]):
    """RoleList is a collection of Roles."""

    kube_kind: ClassVar[str | None] = "RoleList"
    kube_api_version: ClassVar[str | None] = "rbac.authorization.k8s.io/v1beta1"


class RoleBindingV1Beta1(KubeResource):
    """RoleBinding grants the permissions of a role within a namespace."""

    kube_kind: ClassVar[str | None] = "RoleBinding"
    kube_api_version: ClassVar[str | None] = "rbac.authorization.k8s.io/v1beta1"
    kube_apis: ClassVar[tuple[UrlTemplate, ...]] = (
        url_template(f"{_GROUP}/rolebindings", Op.LIST),
        url_template(f"{_GROUP}/watch/rolebindings", Op.WATCH_LIST),
        url_template(f"{_GROUP}/watch/namespaces/{{namespace}}/rolebindings", Op.WATCH_LIST),
        url_template(
            f"{_GROUP}/watch/namespaces/{{namespace}}/rolebindings/{{name}}", Op.WATCH
        ),
        url_template(
            f"{_GROUP}/namespaces/{{namespace}}/rolebindings",
            Op.CREATE,
            Op.DELETE_COLLECTION,
            Op.LIST,
        ),
        url_template(
            f"{_GROUP}/namespaces/{{namespace}}/rolebindings/{{name}}",
            Op.DELETE,
            Op.GET,
            Op.PATCH,
            Op.UPDATE,
        ),
    )

    role_ref: RoleRefV1Beta1
    subjects: list[SubjectV1Beta1] = Field(default_factory=list)


class RoleBindingListV1Beta1(KubeResourceList[RoleBindingV1Beta1]):
    """RoleBindingList is a collection of RoleBindings."""

    kube_kind: ClassVar[str | None] = "RoleBindingList"
    kube_api_version: ClassVar[str | None] = "rbac.authorization.k8s.io/v1beta1"


class ClusterRoleV1Beta1(KubeResource):
    """ClusterRole is a cluster level grouping of PolicyRules."""

    kube_kind: ClassVar[str | None] = "ClusterRole"
    kube_api_version: ClassVar[str | None] = "rbac.authorization.k8s.io/v1beta1"
    kube_apis: ClassVar[tuple[UrlTemplate, ...]] = (
        url_template(f"{_GROUP}/clusterroles", Op.CREATE, Op.DELETE_COLLECTION, Op.LIST),
        url_template(
            f"{_GROUP}/clusterroles/{{name}}", Op.DELETE, Op.GET, Op.PATCH, Op.UPDATE
        ),
        url_template(f"{_GROUP}/watch/clusterroles", Op.WATCH_LIST),
        url_template(f"{_GROUP}/watch/clusterroles/{{name}}", Op.WATCH),
    )

    rules: list[PolicyRuleV1Beta1] = Field(default_factory=list)
