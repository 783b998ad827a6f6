"""Contexts command: resolve every kubeconfig context and report the outcome."""

from __future__ import annotations

import typer
from rich.markup import escape
from rich.table import Table

from kubeclient.cli.commands.base import (
    KubeconfigOption,
    NamespaceOption,
    console,
    handle_kube_error,
)
from kubeclient.integrations.kubernetes.exceptions import KubeConfigError
from kubeclient.integrations.kubernetes.kubeconfig import load_kube_config
from kubeclient.integrations.kubernetes.profile import iter_profiles
from kubeclient.logging import get_logger

logger = get_logger(__name__)


def contexts(
    kubeconfig: KubeconfigOption = None,
    namespace: NamespaceOption = None,
) -> None:
    """List every context with its resolved connection profile.

    Contexts that fail to resolve are listed with the reason. Exits with
    code 1 if any context failed.

    Examples:
        kubeclient contexts
        kubeclient contexts --kubeconfig ./admin.conf -n kube-system
    """
    try:
        document = load_kube_config(kubeconfig)
    except KubeConfigError as e:
        handle_kube_error(e)
        return

    table = Table(title=f"Contexts ({document.source_path or 'kubeconfig'})")
    table.add_column("", no_wrap=True)
    table.add_column("Context", style="cyan", no_wrap=True)
    table.add_column("Endpoint")
    table.add_column("Namespace")
    table.add_column("Credential")
    table.add_column("Status")

    failed = 0
    for outcome in iter_profiles(document, namespace):
        marker = "*" if outcome.context_name == document.current_context else ""
        if outcome.profile is not None:
            profile = outcome.profile
            table.add_row(
                marker,
                outcome.context_name,
                profile.endpoint,
                profile.namespace,
                profile.dominant_credential.replace("_", " "),
                "[green]ok[/green]",
            )
        else:
            failed += 1
            error = escape(str(outcome.error))
            table.add_row(marker, outcome.context_name, "", "", "", f"[red]{error}[/red]")

    console.print(table)
    logger.info("contexts_listed", total=len(document.contexts), failed=failed)

    if not document.contexts:
        console.print("[yellow]No contexts defined.[/yellow]")
    if failed:
        raise typer.Exit(1)
