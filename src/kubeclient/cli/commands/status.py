"""Status command for showing the active connection profile."""

from __future__ import annotations

import platform
from typing import Annotated, Any

import typer
from rich.table import Table

from kubeclient import __version__
from kubeclient.cli.commands.base import (
    ContextOption,
    KubeconfigOption,
    NamespaceOption,
    console,
    handle_kube_error,
)
from kubeclient.integrations.kubernetes.client import KubernetesClient
from kubeclient.integrations.kubernetes.config import KubeClientSettings, load_connection_profile
from kubeclient.integrations.kubernetes.exceptions import KubernetesError
from kubeclient.logging import get_logger

logger = get_logger(__name__)


def status(
    kubeconfig: KubeconfigOption = None,
    context: ContextOption = None,
    namespace: NamespaceOption = None,
    check: Annotated[
        bool, typer.Option("--check", help="Also query the API server version")
    ] = False,
) -> None:
    """Show the connection profile kubeclient would use.

    Settings come from KUBECLIENT_* environment variables, overridden by
    the options given here.

    Examples:
        kubeclient status
        kubeclient status --context prod --check
    """
    overrides: dict[str, Any] = {}
    if kubeconfig:
        overrides["kubeconfig"] = kubeconfig
    if context:
        overrides["context"] = context
    if namespace:
        overrides["namespace"] = namespace

    try:
        from_env = KubeClientSettings.from_env().model_dump()
        settings = KubeClientSettings.model_validate({**from_env, **overrides})
        profile = load_connection_profile(settings)
    except KubernetesError as e:
        handle_kube_error(e)
        return

    table = Table(title="Connection Profile")
    table.add_column("Setting", style="cyan", no_wrap=True)
    table.add_column("Value")

    table.add_row("Context", profile.context_name or "-")
    table.add_row("Endpoint", profile.endpoint)
    table.add_row("Namespace", profile.namespace)
    table.add_row("Credential", profile.dominant_credential.replace("_", " "))
    if profile.client_certificate is not None:
        table.add_row("Certificate subject", profile.client_certificate.subject)
    table.add_row("CA bundle", "yes" if profile.ca_certificate else "system trust store")
    table.add_row("TLS verification", "disabled" if profile.allow_insecure else "enabled")
    table.add_row("Source", settings.source)
    table.add_row("kubeclient", f"{__version__} (Python {platform.python_version()})")

    if check:
        try:
            with KubernetesClient(profile, timeout=settings.timeout) as client:
                version = client.get_version()
        except KubernetesError as e:
            console.print(table)
            handle_kube_error(e)
            return
        table.add_row("Server version", str(version.get("gitVersion", "unknown")))

    console.print(table)
    logger.info("status_shown", context=profile.context_name, checked=check)
