"""Connection profile resolution.

Turns one context of a kubeconfig document (or every context, in bulk) into a
fully-resolved, immutable ``ConnectionProfile``.

Namespace precedence is the same for every entry point: an explicit
caller-supplied namespace, then the context's own namespace, then
``"default"``.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal
from urllib.parse import urlparse

import structlog
from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator

from kubeclient.integrations.kubernetes.credentials import ClientCertificate, CredentialResolver
from kubeclient.integrations.kubernetes.exceptions import (
    KubeConfigError,
    MissingContextError,
    UnknownClusterError,
    UnknownContextError,
    UnknownUserError,
)
from kubeclient.integrations.kubernetes.kubeconfig import (
    Context,
    KubeConfigDocument,
    load_kube_config,
)

logger = structlog.get_logger()

DEFAULT_NAMESPACE = "default"

CredentialKind = Literal["client_certificate", "bearer_token", "none"]


def select_namespace(explicit: str | None, context_namespace: str | None) -> str:
    """Apply the namespace precedence rule."""
    return explicit or context_namespace or DEFAULT_NAMESPACE


class ConnectionProfile(BaseModel):
    """Everything needed to talk to one API server as one identity.

    Frozen, so a single instance can be shared between threads and tasks.
    """

    model_config = ConfigDict(frozen=True)

    endpoint: str
    namespace: str = DEFAULT_NAMESPACE
    client_certificate: ClientCertificate | None = None
    ca_certificate: bytes | None = Field(default=None, repr=False)
    token: SecretStr | None = None
    allow_insecure: bool = False
    context_name: str | None = None
    context_namespace: str | None = None

    @field_validator("endpoint")
    @classmethod
    def validate_endpoint(cls, v: str) -> str:
        """Validate endpoint is an absolute http(s) URI."""
        parsed = urlparse(v)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError("endpoint must be an absolute http:// or https:// URI")
        return v.rstrip("/")

    @field_validator("namespace")
    @classmethod
    def validate_namespace(cls, v: str) -> str:
        """Validate namespace is not blank."""
        if not v.strip():
            raise ValueError("namespace must not be empty")
        return v

    @property
    def bearer_token(self) -> str | None:
        """The bearer token in clear text, if any."""
        return self.token.get_secret_value() if self.token else None

    @property
    def dominant_credential(self) -> CredentialKind:
        """The credential that identifies the caller.

        A client certificate wins over a bearer token; both are still
        presented when both are configured.
        """
        if self.client_certificate is not None:
            return "client_certificate"
        if self.token is not None:
            return "bearer_token"
        return "none"

    def with_namespace(self, namespace: str) -> ConnectionProfile:
        """Return a copy of this profile targeting another namespace."""
        return type(self)(**{**dict(self), "namespace": namespace})


def _build_profile(
    document: KubeConfigDocument,
    context: Context,
    namespace: str | None,
) -> ConnectionProfile:
    cluster = document.get_cluster(context.cluster)
    if cluster is None:
        raise UnknownClusterError(context.cluster, context_name=context.name)

    user = document.get_user(context.user)
    if user is None:
        raise UnknownUserError(context.user, context_name=context.name)

    resolver = CredentialResolver(document.base_dir)
    token = resolver.resolve_bearer_token(user)

    profile = ConnectionProfile(
        endpoint=cluster.server,
        namespace=select_namespace(namespace, context.namespace),
        client_certificate=resolver.resolve_client_certificate(user),
        ca_certificate=resolver.resolve_ca_certificate(cluster),
        token=SecretStr(token) if token else None,
        allow_insecure=cluster.insecure_skip_tls_verify,
        context_name=context.name,
        context_namespace=context.namespace,
    )
    logger.debug(
        "resolved_connection_profile",
        context=context.name,
        cluster=cluster.name,
        user=user.name,
        endpoint=profile.endpoint,
        namespace=profile.namespace,
        credential=profile.dominant_credential,
    )
    return profile


def resolve_profile(
    document: KubeConfigDocument,
    context_name: str | None = None,
    namespace: str | None = None,
) -> ConnectionProfile:
    """Resolve a single context into a connection profile.

    Args:
        document: Parsed kubeconfig document.
        context_name: Context to resolve; defaults to the current context.
        namespace: Namespace override for the profile.

    Returns:
        The resolved profile.

    Raises:
        MissingContextError: If no context was named and none is current.
        UnknownContextError: If the context does not exist.
        UnknownClusterError: If the context's cluster does not exist.
        UnknownUserError: If the context's user identity does not exist.
        CredentialResolutionError: If credential material is missing or invalid.
    """
    target = context_name or document.current_context
    if not target:
        raise MissingContextError()

    context = document.get_context(target)
    if context is None:
        raise UnknownContextError(target)

    return _build_profile(document, context, namespace)


@dataclass(frozen=True)
class ProfileOutcome:
    """Result of resolving one context in bulk mode."""

    context_name: str
    profile: ConnectionProfile | None = None
    error: KubeConfigError | None = None

    @property
    def ok(self) -> bool:
        """True when the context resolved."""
        return self.error is None


@dataclass
class ProfileResolution:
    """Profiles resolved in bulk, keyed by context name, with per-context failures."""

    profiles: dict[str, ConnectionProfile] = field(default_factory=dict)
    failures: dict[str, KubeConfigError] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """True when every context resolved."""
        return not self.failures


def iter_profiles(
    document: KubeConfigDocument,
    namespace: str | None = None,
) -> Iterator[ProfileOutcome]:
    """Resolve every context lazily, one outcome per context.

    Each context is resolved independently; a failure is reported in its
    outcome and does not stop the iteration. Stopping iteration early skips
    the remaining contexts.
    """
    for context in document.contexts:
        try:
            profile = _build_profile(document, context, namespace)
        except KubeConfigError as e:
            logger.warning("context_resolution_failed", context=context.name, error=str(e))
            yield ProfileOutcome(context_name=context.name, error=e)
        else:
            yield ProfileOutcome(context_name=context.name, profile=profile)


def resolve_all_profiles(
    document: KubeConfigDocument,
    namespace: str | None = None,
) -> ProfileResolution:
    """Resolve every context in the document into a named profile."""
    resolution = ProfileResolution()
    for outcome in iter_profiles(document, namespace):
        if outcome.profile is not None:
            resolution.profiles[outcome.context_name] = outcome.profile
        elif outcome.error is not None:
            resolution.failures[outcome.context_name] = outcome.error

    logger.info(
        "resolved_connection_profiles",
        resolved=len(resolution.profiles),
        failed=len(resolution.failures),
    )
    return resolution


def profile_from_kube_config(
    path: str | Path | None = None,
    context_name: str | None = None,
    namespace: str | None = None,
) -> ConnectionProfile:
    """Load a kubeconfig file and resolve one context from it."""
    return resolve_profile(load_kube_config(path), context_name, namespace)


def profiles_from_kube_config(
    path: str | Path | None = None,
    namespace: str | None = None,
) -> ProfileResolution:
    """Load a kubeconfig file and resolve every context in it."""
    return resolve_all_profiles(load_kube_config(path), namespace)
