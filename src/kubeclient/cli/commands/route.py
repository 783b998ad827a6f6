"""Route command: show the request an operation on a bundled resource maps to."""

from __future__ import annotations

from typing import Annotated

import typer

from kubeclient.cli.commands.base import (
    ContextOption,
    KubeconfigOption,
    NamespaceOption,
    console,
    handle_kube_error,
)
from kubeclient.integrations.kubernetes.exceptions import KubernetesError
from kubeclient.integrations.kubernetes.models import BUNDLED_RESOURCES
from kubeclient.integrations.kubernetes.operations import OperationKind, PatchStrategy
from kubeclient.integrations.kubernetes.profile import profile_from_kube_config
from kubeclient.integrations.kubernetes.router import build_request
from kubeclient.logging import get_logger

logger = get_logger(__name__)


def route(
    kind: Annotated[str, typer.Argument(help="Resource kind, e.g. pod, role, storageclass")],
    operation: Annotated[OperationKind, typer.Argument(help="Operation to route")],
    name: Annotated[str | None, typer.Option("--name", help="Resource name")] = None,
    subresource: Annotated[
        str | None, typer.Option("--subresource", help="Subresource, e.g. status")
    ] = None,
    all_namespaces: Annotated[
        bool, typer.Option("--all-namespaces", "-A", help="Target cluster scope")
    ] = False,
    patch_strategy: Annotated[
        PatchStrategy | None, typer.Option("--patch-strategy", help="Patch format")
    ] = None,
    namespace: NamespaceOption = None,
    context: ContextOption = None,
    kubeconfig: KubeconfigOption = None,
) -> None:
    """Print the HTTP method and URL for an operation.

    The namespace defaults to the context's namespace unless
    --all-namespaces is given.

    Examples:
        kubeclient route pod get --name web-0
        kubeclient route role list -A
        kubeclient route deployment patch --name api --patch-strategy strategic-merge
    """
    resource_type = BUNDLED_RESOURCES.get(kind.lower())
    if resource_type is None:
        console.print(f"[red]Error:[/red] Unknown resource kind '{kind}'")
        console.print(f"  Known kinds: {', '.join(sorted(BUNDLED_RESOURCES))}")
        raise typer.Exit(2)

    try:
        profile = profile_from_kube_config(kubeconfig, context, namespace)
        request = build_request(
            profile,
            resource_type,
            operation,
            namespace=None if all_namespaces else profile.namespace,
            name=name,
            subresource=subresource,
            patch_strategy=patch_strategy,
        )
    except KubernetesError as e:
        handle_kube_error(e)
        return

    logger.debug("route_resolved", kind=resource_type.kube_kind, url=request.url)
    console.print(f"[bold]{request.method}[/bold] {request.url}", highlight=False, soft_wrap=True)
    if request.streaming:
        console.print("[dim]streaming: watch events[/dim]")
    if request.content_type:
        console.print(f"[dim]content-type: {request.content_type}[/dim]")
