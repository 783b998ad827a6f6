"""kubeclient command line entry point."""

from __future__ import annotations

from typing import Annotated

import typer

from kubeclient import __version__
from kubeclient.cli.commands import contexts, route, status
from kubeclient.cli.commands.base import console
from kubeclient.logging.config import configure_logging

app = typer.Typer(
    name="kubeclient",
    help="Inspect kubeconfig contexts, connection profiles and API routes.",
    no_args_is_help=True,
    pretty_exceptions_show_locals=False,
)


def _print_version(value: bool) -> None:
    if value:
        console.print(f"kubeclient version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=_print_version,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log at INFO level.")] = False,
    debug: Annotated[bool, typer.Option("--debug", help="Log at DEBUG level.")] = False,
    json_logs: Annotated[
        bool, typer.Option("--json-logs", help="Render console logs as JSON.")
    ] = False,
    log_file: Annotated[
        bool,
        typer.Option(
            "--log-file/--no-log-file",
            help="Also write JSON logs under KUBECLIENT_LOG_DIR.",
        ),
    ] = True,
) -> None:
    """kubeclient - Kubernetes connection profiles and resource routing."""
    configure_logging(
        verbose=verbose, debug=debug, json_output=json_logs, file_logging=log_file
    )


app.command(name="contexts")(contexts.contexts)
app.command(name="route")(route.route)
app.command(name="status")(status.status)


if __name__ == "__main__":
    app()
