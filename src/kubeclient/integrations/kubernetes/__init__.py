"""Kubernetes integration - connection profiles, resource routing and API client."""

from kubeclient.integrations.kubernetes.client import KubernetesClient, make_retry_decorator
from kubeclient.integrations.kubernetes.config import KubeClientSettings, load_connection_profile
from kubeclient.integrations.kubernetes.exceptions import (
    AmbientIdentityUnavailableError,
    ConfigParseError,
    CredentialResolutionError,
    KubeConfigError,
    KubernetesApiError,
    KubernetesAuthError,
    KubernetesConflictError,
    KubernetesConnectionError,
    KubernetesError,
    KubernetesNotFoundError,
    KubernetesValidationError,
    MalformedWatchEventError,
    MissingContextError,
    UnknownClusterError,
    UnknownContextError,
    UnknownUserError,
    UnsupportedOperationError,
)
from kubeclient.integrations.kubernetes.kubeconfig import KubeConfigDocument, load_kube_config
from kubeclient.integrations.kubernetes.operations import OperationKind, PatchStrategy
from kubeclient.integrations.kubernetes.pod_identity import from_pod_service_account
from kubeclient.integrations.kubernetes.profile import (
    ConnectionProfile,
    ProfileResolution,
    profile_from_kube_config,
    profiles_from_kube_config,
    resolve_all_profiles,
    resolve_profile,
)
from kubeclient.integrations.kubernetes.registry import (
    ResourceDescriptor,
    ResourceRegistry,
    default_registry,
    new_resource,
)
from kubeclient.integrations.kubernetes.router import KubeRequest, build_request
from kubeclient.integrations.kubernetes.watch import (
    WatchEvent,
    WatchEventType,
    adecode_watch_stream,
    decode_watch_stream,
)

__all__ = [
    "AmbientIdentityUnavailableError",
    "ConfigParseError",
    "ConnectionProfile",
    "CredentialResolutionError",
    "KubeClientSettings",
    "KubeConfigDocument",
    "KubeConfigError",
    "KubeRequest",
    "KubernetesApiError",
    "KubernetesAuthError",
    "KubernetesClient",
    "KubernetesConflictError",
    "KubernetesConnectionError",
    "KubernetesError",
    "KubernetesNotFoundError",
    "KubernetesValidationError",
    "MalformedWatchEventError",
    "MissingContextError",
    "OperationKind",
    "PatchStrategy",
    "ProfileResolution",
    "ResourceDescriptor",
    "ResourceRegistry",
    "UnknownClusterError",
    "UnknownContextError",
    "UnknownUserError",
    "UnsupportedOperationError",
    "WatchEvent",
    "WatchEventType",
    "adecode_watch_stream",
    "build_request",
    "decode_watch_stream",
    "default_registry",
    "from_pod_service_account",
    "load_connection_profile",
    "load_kube_config",
    "make_retry_decorator",
    "new_resource",
    "profile_from_kube_config",
    "profiles_from_kube_config",
    "resolve_all_profiles",
    "resolve_profile",
]
