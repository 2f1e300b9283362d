"""Async command support for Typer."""

import asyncio
from collections.abc import Callable, Coroutine
from functools import wraps
from typing import Any, TypeVar

import typer

from oauth1_gate.exceptions import GateError

T = TypeVar("T")


def async_command(f: Callable[..., Coroutine[Any, Any, T]]) -> Callable[..., T]:
    """Decorator to run async Typer commands.

    Gate errors (provider failures, sequencing errors) are printed and turned
    into exit code 1 instead of a traceback.

    Usage:
        @app.command()
        @async_command
        async def my_command(ctx: typer.Context):
            ...
    """

    @wraps(f)
    def wrapper(*args: Any, **kwargs: Any) -> T:
        async def run_with_error_handling() -> T:
            try:
                return await f(*args, **kwargs)
            except GateError as e:
                from oauth1_gate.cli.formatters import print_error

                print_error(e.message)
                raise typer.Exit(1) from None

        return asyncio.run(run_with_error_handling())

    return wrapper
