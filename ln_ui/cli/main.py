"""
Command-line interface for the Hedera local node.

Exposes the network lifecycle commands (start, stop, restart), account
generation and record file debugging.
"""

from __future__ import annotations

import typer

from ln_ui.cli.commands.network import register_network_commands
from ln_ui.wiring.dependencies import UIContext, configure_logging

# Initialize global context (lazy)
ctx_store = UIContext()

app = typer.Typer(help="Run a Hedera network locally with Docker Compose.", no_args_is_help=True)


@app.callback(invoke_without_command=True)
def entry(
    ctx: typer.Context,
    headless: bool = typer.Option(
        False,
        "--headless",
        help="Force plain output without Rich styling (useful in CI).",
    ),
) -> None:
    """Global entry point handling interactive vs headless modes."""
    configure_logging(force=True)
    ctx_store.headless = headless

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


register_network_commands(app=app, ctx=ctx_store)


def main() -> None:
    """Console script entrypoint (Typer app)."""
    app()


if __name__ == "__main__":
    main()
