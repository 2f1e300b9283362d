"""Configuration inspection commands."""

import typer

from oauth1_gate.cli.config import CLIConfig, OutputFormat
from oauth1_gate.cli.formatters import format_output, mask, print_error

app = typer.Typer(no_args_is_help=True)


@app.command("show")
def show(
    ctx: typer.Context,
    output: OutputFormat = typer.Option(
        OutputFormat.TABLE,
        "--output",
        "-o",
        help="Output format.",
    ),
) -> None:
    """Show the effective gate and provider configuration."""
    config: CLIConfig = ctx.obj

    gate = config.load_gate()
    format_output(
        {
            "failure_url": gate.failure_url,
            "authorization_parameter_name": gate.authorization_parameter_name,
            "login_url": gate.login_url,
            "success_url": gate.success_url,
            "persist_request_token": gate.persist_request_token,
        },
        output,
        title="Gate",
    )

    try:
        provider = config.load_provider()
    except (ValueError, FileNotFoundError) as e:
        print_error(str(e))
        raise typer.Exit(1) from None

    format_output(
        {
            "consumer_key": provider.consumer_key,
            "consumer_secret": mask(provider.consumer_secret),
            "request_token_url": provider.request_token_url,
            "access_token_url": provider.access_token_url,
            "authorize_url": provider.authorize_url,
            "callback_url": provider.callback_url,
            "signature_method": provider.signature_method,
            "timeout": provider.timeout,
        },
        output,
        title="Provider",
    )
