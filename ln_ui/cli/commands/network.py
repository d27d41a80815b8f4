from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Optional

import typer
from pydantic import ValidationError

from ln_common.api import configure_logging
from ln_controller.api import CLIService
from ln_controller.state_data import ACCOUNT_CREATION, DEBUG, RESTART, START, STOP
from ln_ui.wiring.dependencies import UIContext

DETACHED_OPTION = typer.Option(False, "--detached", "-d", help="Run the local node in detached mode.")
HOST_OPTION = typer.Option("127.0.0.1", "--host", "-h", help="Host the services are reachable on.")
NETWORK_OPTION = typer.Option(
    "local", "--network", "-n", help="Network configuration: local, mainnet, testnet or previewnet."
)
ASYNC_OPTION = typer.Option(False, "--async", "-a", help="Create accounts asynchronously.")
BALANCE_OPTION = typer.Option(10000, "--balance", help="Starting balance of the generated accounts (HBAR).")
LIMITS_OPTION = typer.Option(False, "--limits", "-l", help="Keep the JSON-RPC relay rate limits enabled.")
DEV_OPTION = typer.Option(False, "--dev", help="Enable developer mode.")
FULL_OPTION = typer.Option(False, "--full", help="Run the full mirror node stack instead of turbo mode.")
MULTINODE_OPTION = typer.Option(False, "--multinode", help="Start a multi node network.")
USER_COMPOSE_OPTION = typer.Option(
    True, "--usercompose/--no-usercompose", help="Apply user compose overrides."
)
COMPOSE_DIR_OPTION = typer.Option("./overrides/", "--composedir", help="Directory holding compose overrides.")
BLOCKLIST_OPTION = typer.Option(False, "--blocklist", "-b", help="Enable account blocklisting.")
VERBOSE_OPTION = typer.Option("info", "--verbose", help="Log verbosity: info or trace.")
WORKDIR_OPTION = typer.Option(
    None, "--workdir", help="Working directory for configuration and logs (env: LN_WORK_DIR)."
)
ENABLE_DEBUG_OPTION = typer.Option(False, "--enable-debug", help="Keep record stream files for `debug`.")
INITIAL_RESOURCES_OPTION = typer.Option(
    False, "--create-initial-resources", help="Create the fixture accounts and tokens on startup."
)


def run_workflow(ctx: UIContext, command: str, workflow: str, raw: dict[str, Any]) -> None:
    """Resolve options, run *workflow* and exit with its code."""
    try:
        options = CLIService.resolve_options(command, raw)
    except ValidationError as exc:
        ctx.ui.present.error(f"Invalid options for `{command}`: {exc}")
        raise typer.Exit(1)

    configure_logging(level=options.verbose.to_logging_level(), force=True)
    controller = ctx.build_controller(workflow, options)
    try:
        code = asyncio.run(controller.run())
    except KeyboardInterrupt:
        ctx.ui.present.warning("Interrupted.")
        raise typer.Exit(130)

    if code != 0:
        ctx.ui.present.error(f"`{command}` failed, see the log output above.")
    raise typer.Exit(code)


def register_network_commands(app: typer.Typer, ctx: UIContext) -> None:
    """Register the network lifecycle commands on the given Typer app."""

    def _startup_raw(
        accounts: int,
        detached: bool,
        host: str,
        network: str,
        async_mode: bool,
        balance: float,
        limits: bool,
        dev: bool,
        full: bool,
        multinode: bool,
        usercompose: bool,
        composedir: str,
        blocklist: bool,
        verbose: str,
        workdir: Optional[Path],
        enable_debug: bool,
        create_initial_resources: bool,
    ) -> dict[str, Any]:
        return {
            "accounts": accounts,
            "detached": detached,
            "host": host,
            "network": network,
            "async_mode": async_mode,
            "balance": balance,
            "limits": limits,
            "dev_mode": dev,
            "full_mode": full,
            "multi_node": multinode,
            "user_compose": usercompose,
            "user_compose_dir": composedir,
            "blocklisting": blocklist,
            "verbose": verbose,
            "work_dir": workdir,
            "enable_debug": enable_debug,
            "create_initial_resources": create_initial_resources,
        }

    @app.command("start")
    def start(
        accounts: int = typer.Argument(10, help="Number of accounts of each type to generate."),
        detached: bool = DETACHED_OPTION,
        host: str = HOST_OPTION,
        network: str = NETWORK_OPTION,
        async_mode: bool = ASYNC_OPTION,
        balance: float = BALANCE_OPTION,
        limits: bool = LIMITS_OPTION,
        dev: bool = DEV_OPTION,
        full: bool = FULL_OPTION,
        multinode: bool = MULTINODE_OPTION,
        usercompose: bool = USER_COMPOSE_OPTION,
        composedir: str = COMPOSE_DIR_OPTION,
        blocklist: bool = BLOCKLIST_OPTION,
        verbose: str = VERBOSE_OPTION,
        workdir: Optional[Path] = WORKDIR_OPTION,
        enable_debug: bool = ENABLE_DEBUG_OPTION,
        create_initial_resources: bool = INITIAL_RESOURCES_OPTION,
    ) -> None:
        """Start the local node and generate accounts."""
        raw = _startup_raw(
            accounts, detached, host, network, async_mode, balance, limits, dev, full,
            multinode, usercompose, composedir, blocklist, verbose, workdir, enable_debug,
            create_initial_resources,
        )
        run_workflow(ctx, "start", START, raw)

    @app.command("restart")
    def restart(
        accounts: int = typer.Argument(10, help="Number of accounts of each type to generate."),
        detached: bool = DETACHED_OPTION,
        host: str = HOST_OPTION,
        network: str = NETWORK_OPTION,
        async_mode: bool = ASYNC_OPTION,
        balance: float = BALANCE_OPTION,
        limits: bool = LIMITS_OPTION,
        dev: bool = DEV_OPTION,
        full: bool = FULL_OPTION,
        multinode: bool = MULTINODE_OPTION,
        usercompose: bool = USER_COMPOSE_OPTION,
        composedir: str = COMPOSE_DIR_OPTION,
        blocklist: bool = BLOCKLIST_OPTION,
        verbose: str = VERBOSE_OPTION,
        workdir: Optional[Path] = WORKDIR_OPTION,
        enable_debug: bool = ENABLE_DEBUG_OPTION,
        create_initial_resources: bool = INITIAL_RESOURCES_OPTION,
    ) -> None:
        """Stop the local node, then start it again."""
        raw = _startup_raw(
            accounts, detached, host, network, async_mode, balance, limits, dev, full,
            multinode, usercompose, composedir, blocklist, verbose, workdir, enable_debug,
            create_initial_resources,
        )
        run_workflow(ctx, "restart", RESTART, raw)

    @app.command("stop")
    def stop(
        verbose: str = VERBOSE_OPTION,
        workdir: Optional[Path] = WORKDIR_OPTION,
    ) -> None:
        """Stop the local node and remove its containers, volumes and logs."""
        run_workflow(ctx, "stop", STOP, {"verbose": verbose, "work_dir": workdir})

    @app.command("generate-accounts")
    def generate_accounts(
        accounts: int = typer.Argument(10, help="Number of accounts of each type to generate."),
        host: str = HOST_OPTION,
        async_mode: bool = ASYNC_OPTION,
        balance: float = BALANCE_OPTION,
        verbose: str = VERBOSE_OPTION,
        workdir: Optional[Path] = WORKDIR_OPTION,
    ) -> None:
        """Generate accounts against an already running node."""
        raw = {
            "accounts": accounts,
            "host": host,
            "async_mode": async_mode,
            "balance": balance,
            "verbose": verbose,
            "work_dir": workdir,
        }
        run_workflow(ctx, "generate-accounts", ACCOUNT_CREATION, raw)

    @app.command("debug")
    def debug(
        timestamp: str = typer.Argument(..., help="Consensus timestamp: 0000000000.000000000 or 0000000000-000000000."),
        verbose: str = VERBOSE_OPTION,
        workdir: Optional[Path] = WORKDIR_OPTION,
    ) -> None:
        """Parse the record file holding the transaction at TIMESTAMP."""
        run_workflow(ctx, "debug", DEBUG, {"timestamp": timestamp, "verbose": verbose, "work_dir": workdir})
