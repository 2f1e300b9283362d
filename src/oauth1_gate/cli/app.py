"""Main Typer application."""

import logging
from pathlib import Path

import typer
from rich.logging import RichHandler

from oauth1_gate.cli.config import CLIConfig

# Create main app
app = typer.Typer(
    name="oauth1-gate",
    help="OAuth 1.0a authentication gate tools.",
    no_args_is_help=True,
)


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging.",
    ),
    provider_file: Path | None = typer.Option(
        None,
        "--provider-file",
        "-f",
        help="Provider config file (default: env vars, then ~/.config/oauth1-gate/provider.json).",
        envvar="OAUTH1_GATE_PROVIDER_FILE",
    ),
) -> None:
    """OAuth 1.0a authentication gate tools.

    Inspect the gate configuration and exercise the provider handshake
    from the command line.
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(rich_tracebacks=True)],
        )

    ctx.obj = CLIConfig(verbose=verbose, provider_file=provider_file)
