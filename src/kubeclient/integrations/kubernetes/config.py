"""Kubernetes client settings and connection profile source selection."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Literal

import structlog
from pydantic import BaseModel, ConfigDict, field_validator

from kubeclient.integrations.kubernetes.exceptions import AmbientIdentityUnavailableError
from kubeclient.integrations.kubernetes.pod_identity import from_pod_service_account
from kubeclient.integrations.kubernetes.profile import ConnectionProfile, profile_from_kube_config

logger = structlog.get_logger()

ProfileSource = Literal["auto", "kubeconfig", "in_cluster"]


class KubeClientSettings(BaseModel):
    """Kubernetes client settings.

    ``source`` picks where the connection profile comes from: ``kubeconfig``,
    ``in_cluster`` (pod service account), or ``auto`` (service account if
    available, kubeconfig otherwise).
    """

    model_config = ConfigDict(extra="forbid")

    kubeconfig: str | None = None
    context: str | None = None
    namespace: str | None = None
    source: ProfileSource = "auto"
    timeout: int = 30
    retry_attempts: int = 3

    @field_validator("kubeconfig")
    @classmethod
    def validate_kubeconfig(cls, v: str | None) -> str | None:
        """Expand ~ in kubeconfig path."""
        return str(Path(v).expanduser()) if v else None

    @field_validator("source")
    @classmethod
    def validate_source(cls, v: str) -> str:
        """Validate profile source."""
        valid_sources = {"auto", "kubeconfig", "in_cluster"}
        if v not in valid_sources:
            raise ValueError(f"source must be one of: {', '.join(sorted(valid_sources))}")
        return v

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v: int) -> int:
        """Validate timeout is positive."""
        if v <= 0:
            raise ValueError("timeout must be positive")
        return v

    @field_validator("retry_attempts")
    @classmethod
    def validate_retry_attempts(cls, v: int) -> int:
        """Validate retry_attempts is positive."""
        if v < 1:
            raise ValueError("retry_attempts must be at least 1")
        return v

    @classmethod
    def from_env(cls, base_config: dict[str, Any] | None = None) -> KubeClientSettings:
        """Create settings with environment variable overrides.

        Environment variables take precedence over base_config values.

        Supported environment variables:
            KUBECLIENT_KUBECONFIG: Kubeconfig file path
            KUBECLIENT_CONTEXT: Context to resolve
            KUBECLIENT_NAMESPACE: Namespace override
            KUBECLIENT_SOURCE: Profile source (auto, kubeconfig, in_cluster)
            KUBECLIENT_TIMEOUT: Request timeout in seconds
            KUBECLIENT_RETRY_ATTEMPTS: Attempts for caller-side retries
        """
        config_dict = base_config.copy() if base_config else {}

        if kubeconfig := os.environ.get("KUBECLIENT_KUBECONFIG"):
            config_dict["kubeconfig"] = kubeconfig

        if context := os.environ.get("KUBECLIENT_CONTEXT"):
            config_dict["context"] = context

        if namespace := os.environ.get("KUBECLIENT_NAMESPACE"):
            config_dict["namespace"] = namespace

        if source := os.environ.get("KUBECLIENT_SOURCE"):
            config_dict["source"] = source

        if timeout := os.environ.get("KUBECLIENT_TIMEOUT"):
            config_dict["timeout"] = int(timeout)

        if retry_attempts := os.environ.get("KUBECLIENT_RETRY_ATTEMPTS"):
            config_dict["retry_attempts"] = int(retry_attempts)

        return cls.model_validate(config_dict)


def load_connection_profile(settings: KubeClientSettings) -> ConnectionProfile:
    """Resolve the connection profile the settings select.

    Args:
        settings: Client settings.

    Returns:
        The resolved profile.

    Raises:
        AmbientIdentityUnavailableError: If ``source`` is ``in_cluster`` and no
            service account is available.
        KubeConfigError: If kubeconfig resolution fails.
    """
    if settings.source == "in_cluster":
        return from_pod_service_account(settings.namespace)

    if settings.source == "auto":
        try:
            profile = from_pod_service_account(settings.namespace)
        except AmbientIdentityUnavailableError:
            logger.debug("falling_back_to_kubeconfig", kubeconfig=settings.kubeconfig)
        else:
            logger.debug("loaded_incluster_profile")
            return profile

    profile = profile_from_kube_config(settings.kubeconfig, settings.context, settings.namespace)
    logger.debug(
        "loaded_kubeconfig_profile",
        kubeconfig=settings.kubeconfig,
        context=profile.context_name,
    )
    return profile
