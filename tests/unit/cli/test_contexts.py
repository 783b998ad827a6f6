"""Tests for the contexts command."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
import typer
from typer.testing import CliRunner

WIDE = {"COLUMNS": "200"}


@pytest.mark.unit
@pytest.mark.kubernetes
class TestContextsCommand:
    """Test listing kubeconfig contexts."""

    def test_lists_every_context(
        self,
        cli_runner: CliRunner,
        cli_app: typer.Typer,
        write_kubeconfig: Callable[..., Path],
        kubeconfig_document: dict[str, Any],
    ) -> None:
        """Test resolved and failed contexts are both listed."""
        path = write_kubeconfig(kubeconfig_document)

        result = cli_runner.invoke(cli_app, ["contexts", "--kubeconfig", str(path)], env=WIDE)

        assert result.exit_code == 1
        assert "https://dev.example.com:6443" in result.stdout
        assert "http://127.0.0.1:8080" in result.stdout
        assert "sandbox" in result.stdout
        assert "bearer token" in result.stdout
        assert "broken" in result.stdout
        assert "'missing'" in result.stdout

    def test_all_resolved(
        self,
        cli_runner: CliRunner,
        cli_app: typer.Typer,
        write_kubeconfig: Callable[..., Path],
        kubeconfig_document: dict[str, Any],
    ) -> None:
        """Test the command succeeds when every context resolves."""
        kubeconfig_document["contexts"] = kubeconfig_document["contexts"][:2]
        path = write_kubeconfig(kubeconfig_document)

        result = cli_runner.invoke(cli_app, ["contexts", "--kubeconfig", str(path)], env=WIDE)

        assert result.exit_code == 0
        assert "ok" in result.stdout

    def test_namespace_override(
        self,
        cli_runner: CliRunner,
        cli_app: typer.Typer,
        write_kubeconfig: Callable[..., Path],
        kubeconfig_document: dict[str, Any],
    ) -> None:
        """Test -n overrides every context's namespace."""
        kubeconfig_document["contexts"] = kubeconfig_document["contexts"][:2]
        path = write_kubeconfig(kubeconfig_document)

        result = cli_runner.invoke(
            cli_app, ["contexts", "--kubeconfig", str(path), "-n", "payments"], env=WIDE
        )

        assert result.exit_code == 0
        assert "sandbox" not in result.stdout
        assert result.stdout.count("payments") == 2

    def test_kubeconfig_from_environment(
        self,
        cli_runner: CliRunner,
        cli_app: typer.Typer,
        write_kubeconfig: Callable[..., Path],
        kubeconfig_document: dict[str, Any],
    ) -> None:
        """Test KUBECLIENT_KUBECONFIG selects the file."""
        kubeconfig_document["contexts"] = kubeconfig_document["contexts"][:1]
        path = write_kubeconfig(kubeconfig_document)

        result = cli_runner.invoke(
            cli_app, ["contexts"], env={**WIDE, "KUBECLIENT_KUBECONFIG": str(path)}
        )

        assert result.exit_code == 0
        assert "dev.example.com" in result.stdout

    def test_no_contexts(
        self, cli_runner: CliRunner, cli_app: typer.Typer, write_kubeconfig: Callable[..., Path]
    ) -> None:
        """Test an empty kubeconfig reports no contexts."""
        path = write_kubeconfig({"apiVersion": "v1", "kind": "Config"})

        result = cli_runner.invoke(cli_app, ["contexts", "--kubeconfig", str(path)], env=WIDE)

        assert result.exit_code == 0
        assert "No contexts defined." in result.stdout

    def test_missing_file(
        self, cli_runner: CliRunner, cli_app: typer.Typer, tmp_path: Path
    ) -> None:
        """Test an unreadable kubeconfig exits with an error."""
        result = cli_runner.invoke(
            cli_app, ["contexts", "--kubeconfig", str(tmp_path / "absent")], env=WIDE
        )

        assert result.exit_code == 1
        assert "Invalid kubeconfig" in result.stdout
