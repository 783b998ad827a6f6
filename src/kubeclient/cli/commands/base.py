"""Shared options and error handling for kubeclient commands."""

from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console

from kubeclient.integrations.kubernetes.exceptions import (
    AmbientIdentityUnavailableError,
    CredentialResolutionError,
    KubeConfigError,
    KubernetesAuthError,
    KubernetesConnectionError,
    KubernetesError,
    KubernetesNotFoundError,
    KubernetesValidationError,
    UnsupportedOperationError,
)

console = Console()


# =============================================================================
# Common Typer Option Annotations
# =============================================================================

KubeconfigOption = Annotated[
    str | None,
    typer.Option(
        "--kubeconfig",
        help="Path to the kubeconfig file (defaults to ~/.kube/config)",
        envvar="KUBECLIENT_KUBECONFIG",
    ),
]

ContextOption = Annotated[
    str | None,
    typer.Option(
        "--context",
        help="Kubeconfig context (defaults to current-context)",
    ),
]

NamespaceOption = Annotated[
    str | None,
    typer.Option(
        "--namespace",
        "-n",
        help="Namespace (defaults to the context's namespace or 'default')",
    ),
]


# =============================================================================
# Error Handling
# =============================================================================


def handle_kube_error(error: KubernetesError) -> None:
    """Print a kubeclient error with a hint and exit.

    Raises:
        typer.Exit: Always exits with code 1.
    """
    if isinstance(error, KubernetesConnectionError):
        console.print("[red]Error:[/red] Cannot connect to Kubernetes API server")
        console.print(f"  {error.message}")
        if error.original_error:
            console.print(f"  Cause: {error.original_error}")
        console.print("\n[dim]Hint: Check that the cluster endpoint is reachable.[/dim]")

    elif isinstance(error, KubernetesAuthError):
        console.print("[red]Error:[/red] Authentication/authorization failed")
        console.print(f"  {error.message}")
        console.print("\n[dim]Hint: Check the context's credentials or RBAC permissions.[/dim]")

    elif isinstance(error, KubernetesNotFoundError):
        console.print("[red]Error:[/red] Resource not found")
        console.print(f"  {error.message}")

    elif isinstance(error, KubernetesValidationError):
        console.print("[red]Error:[/red] Validation failed")
        console.print(f"  {error.message}")
        for cause in error.validation_errors:
            console.print(f"    - {cause.get('field', '?')}: {cause.get('message', '')}")

    elif isinstance(error, AmbientIdentityUnavailableError):
        console.print("[red]Error:[/red] Not running with a pod service account")
        console.print(f"  {error.message}")

    elif isinstance(error, CredentialResolutionError):
        console.print("[red]Error:[/red] Invalid credential material")
        console.print(f"  {error.message}")

    elif isinstance(error, KubeConfigError):
        console.print("[red]Error:[/red] Invalid kubeconfig")
        console.print(f"  {error.message}")
        console.print("\n[dim]Hint: Run 'kubeclient contexts' to check every context.[/dim]")

    elif isinstance(error, UnsupportedOperationError):
        console.print(f"[red]Error:[/red] {error.message}")

    else:
        console.print(f"[red]Error:[/red] {error.message}")
        if error.status_code:
            console.print(f"  HTTP Status: {error.status_code}")

    raise typer.Exit(1)
