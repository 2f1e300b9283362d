"""oauth1-gate CLI - Command-line tools for the OAuth1 gate."""

from oauth1_gate.cli.app import app

# Import command modules to register them with the app
from oauth1_gate.cli.commands import auth, settings

# Register sub-apps
app.add_typer(auth.app, name="auth", help="Provider handshake commands.")
app.add_typer(settings.app, name="config", help="Configuration inspection.")


def main() -> None:
    """Entry point for the CLI."""
    app()


__all__ = ["app", "main"]
