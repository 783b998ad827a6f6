"""In-cluster (pod service account) connection profile source."""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path

import structlog
from pydantic import SecretStr

from kubeclient.integrations.kubernetes.credentials import load_certificates_pem
from kubeclient.integrations.kubernetes.exceptions import (
    AmbientIdentityUnavailableError,
    CredentialResolutionError,
)
from kubeclient.integrations.kubernetes.profile import ConnectionProfile, select_namespace

logger = structlog.get_logger()

SERVICE_ACCOUNT_DIR = Path("/var/run/secrets/kubernetes.io/serviceaccount")
SERVICE_HOST_ENV = "KUBERNETES_SERVICE_HOST"
SERVICE_PORT_ENV = "KUBERNETES_SERVICE_PORT"
IN_CLUSTER_CONTEXT = "in-cluster"

_OWNER = "pod service account"


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError) as e:
        raise CredentialResolutionError(
            f"Cannot read '{path}'", owner=_OWNER, original_error=e
        ) from e


def from_pod_service_account(
    namespace: str | None = None,
    *,
    service_account_dir: Path = SERVICE_ACCOUNT_DIR,
    environ: Mapping[str, str] | None = None,
) -> ConnectionProfile:
    """Build a connection profile from the pod's service account.

    Args:
        namespace: Namespace override; defaults to the pod's own namespace.
        service_account_dir: Directory holding ``token``, ``ca.crt`` and
            ``namespace``.
        environ: Environment to read the API endpoint from (defaults to
            ``os.environ``).

    Returns:
        The in-cluster connection profile.

    Raises:
        AmbientIdentityUnavailableError: If not running with a service account
            (expected outside a pod).
        CredentialResolutionError: If the service account material is present
            but unreadable or invalid.
    """
    env = os.environ if environ is None else environ
    host = env.get(SERVICE_HOST_ENV, "")
    port = env.get(SERVICE_PORT_ENV, "")
    token_path = service_account_dir / "token"
    ca_path = service_account_dir / "ca.crt"
    namespace_path = service_account_dir / "namespace"

    missing: list[str] = []
    if not host:
        missing.append(SERVICE_HOST_ENV)
    if not port:
        missing.append(SERVICE_PORT_ENV)
    if not token_path.is_file():
        missing.append(str(token_path))
    if not ca_path.is_file():
        missing.append(str(ca_path))
    if missing:
        logger.debug("pod_identity_unavailable", missing=missing)
        raise AmbientIdentityUnavailableError(missing=missing)

    if not port.isdigit():
        raise AmbientIdentityUnavailableError(f"Invalid {SERVICE_PORT_ENV} value {port!r}")

    token = _read_text(token_path)
    if not token:
        raise CredentialResolutionError(f"Token file '{token_path}' is empty", owner=_OWNER)

    try:
        ca_raw = ca_path.read_bytes()
    except OSError as e:
        raise CredentialResolutionError(
            f"Cannot read '{ca_path}'", owner=_OWNER, original_error=e
        ) from e
    ca_pem = load_certificates_pem(ca_raw, _OWNER, "certificate authority")

    pod_namespace = _read_text(namespace_path) if namespace_path.is_file() else None
    if ":" in host and not host.startswith("["):
        host = f"[{host}]"

    profile = ConnectionProfile(
        endpoint=f"https://{host}:{port}",
        namespace=select_namespace(namespace, pod_namespace),
        ca_certificate=ca_pem,
        token=SecretStr(token),
        context_name=IN_CLUSTER_CONTEXT,
        context_namespace=pod_namespace or None,
    )
    logger.debug(
        "resolved_pod_identity",
        endpoint=profile.endpoint,
        namespace=profile.namespace,
    )
    return profile
