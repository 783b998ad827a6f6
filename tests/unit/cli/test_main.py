"""Tests for main CLI module."""

from __future__ import annotations

from typing import Any

import pytest
import typer
from typer.testing import CliRunner

from kubeclient import __version__


@pytest.mark.unit
class TestCLIMain:
    """Test main CLI entry point."""

    def test_help_option(self, cli_runner: CliRunner, cli_app: typer.Typer) -> None:
        """Test --help lists the commands."""
        result = cli_runner.invoke(cli_app, ["--help"])
        assert result.exit_code == 0
        for command in ("contexts", "route", "status"):
            assert command in result.stdout

    def test_no_args_shows_help(self, cli_runner: CliRunner, cli_app: typer.Typer) -> None:
        """Test running without a command prints usage."""
        result = cli_runner.invoke(cli_app, [])
        assert "Usage" in result.output

    def test_version_option(self, cli_runner: CliRunner, cli_app: typer.Typer) -> None:
        """Test --version option displays version."""
        result = cli_runner.invoke(cli_app, ["--version"])
        assert result.exit_code == 0
        assert f"kubeclient version {__version__}" in result.stdout

    @pytest.mark.parametrize(
        ("flags", "expected"),
        [
            (
                [],
                {"verbose": False, "debug": False, "json_output": False, "file_logging": True},
            ),
            (
                ["-v", "--no-log-file"],
                {"verbose": True, "debug": False, "json_output": False, "file_logging": False},
            ),
            (
                ["--debug", "--json-logs"],
                {"verbose": False, "debug": True, "json_output": True, "file_logging": True},
            ),
        ],
    )
    def test_logging_flags(
        self,
        cli_runner: CliRunner,
        cli_app: typer.Typer,
        mocker: Any,
        flags: list[str],
        expected: dict[str, bool],
    ) -> None:
        """Test global flags are passed to configure_logging."""
        configure = mocker.patch("kubeclient.cli.main.configure_logging")
        mocker.patch("kubeclient.cli.commands.contexts.load_kube_config", side_effect=SystemExit(0))

        cli_runner.invoke(cli_app, [*flags, "contexts"])

        configure.assert_called_once_with(**expected)
