"""Handshake commands."""

import webbrowser

import httpx
import typer

from oauth1_gate.auth import OAuth1Service
from oauth1_gate.cli.async_runner import async_command
from oauth1_gate.cli.config import CLIConfig, OutputFormat
from oauth1_gate.cli.formatters import (
    console,
    format_output,
    mask,
    print_error,
    print_info,
    print_success,
    print_warning,
)
from oauth1_gate.config import GateConfig, ProviderConfig
from oauth1_gate.web import build_gate

app = typer.Typer(no_args_is_help=True)


def _load_configs(config: CLIConfig) -> tuple[GateConfig, ProviderConfig]:
    try:
        return config.load_gate(), config.load_provider()
    except (ValueError, FileNotFoundError) as e:
        print_error(str(e))
        print_info("Set the OAUTH1_* environment variables")
        print_info("Or create a config file at ~/.config/oauth1-gate/provider.json")
        raise typer.Exit(1) from None


@app.command("login-url")
@async_command
async def login_url(ctx: typer.Context) -> None:
    """Print the URL the gate would redirect an unauthenticated user to.

    Falls back to the configured login URL when the provider can't be reached,
    exactly as the gate does.
    """
    config: CLIConfig = ctx.obj
    gate_config, provider_config = _load_configs(config)

    async with httpx.AsyncClient(timeout=provider_config.timeout) as http_client:
        gate = build_gate(gate_config, provider_config, http_client=http_client)
        url = await gate.get_login_url()

    if url == gate_config.login_url:
        print_warning("Provider unavailable, showing configured fallback login URL")
    console.print(url)


@app.command("handshake")
@async_command
async def handshake(
    ctx: typer.Context,
    no_browser: bool = typer.Option(
        False,
        "--no-browser",
        help="Don't open browser automatically.",
    ),
    output: OutputFormat = typer.Option(
        OutputFormat.TABLE,
        "--output",
        "-o",
        help="Output format.",
    ),
) -> None:
    """Run the three-legged flow out-of-band and show the access token.

    1. Fetches a request token
    2. Opens the provider's authorization page
    3. Prompts for the verifier shown by the provider
    4. Exchanges it for an access token (secret is masked)
    """
    config: CLIConfig = ctx.obj
    _, provider_config = _load_configs(config)

    async with OAuth1Service(provider_config) as service:
        # Step 1: Get request token
        print_info("Requesting token from provider...")
        request_token = await service.get_request_token()
        authorization_url = service.get_authorization_url(request_token)

        # Step 2: Open browser or show URL
        if no_browser:
            console.print("\nOpen this URL in your browser:")
            console.print(f"[link]{authorization_url}[/link]")
        else:
            print_info("Opening browser for authorization...")
            webbrowser.open(authorization_url)
            console.print("\n[dim]If browser didn't open, visit:[/dim]")
            console.print(f"[link]{authorization_url}[/link]")

        # Step 3: Get verifier from user
        console.print()
        verifier = typer.prompt("Enter the verification code from the provider")

        # Step 4: Exchange for access token
        print_info("Exchanging verification code for access token...")
        access_token = await service.get_access_token(request_token, verifier.strip())

    print_success("Handshake completed")
    format_output(
        {
            "token": access_token.token,
            "token_secret": mask(access_token.token_secret),
            **access_token.extra,
        },
        output,
        title="Access Token",
    )
