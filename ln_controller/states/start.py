"""Bring the compose stack up and wait for the node ports."""

from __future__ import annotations

import asyncio
from pathlib import Path

from ln_common.errors import NodeConnectionError
from ln_controller.constants import COMPOSE_EVM_FILE, COMPOSE_FILE, CONSENSUS_NODE_PORT, MIRROR_NODE_GRPC_PORT
from ln_controller.events import EventType
from ln_controller.states.base import State, StateKind, show_status_board

USER_COMPOSE_SUFFIX = ".yml"


def user_compose_files(compose_dir: str | Path) -> list[str]:
    """Sorted `*.yml` overrides found in *compose_dir*, as absolute paths."""
    directory = Path(compose_dir).expanduser().resolve()
    if not directory.is_dir():
        return []
    return sorted(
        str(entry)
        for entry in directory.iterdir()
        if entry.is_file() and entry.suffix.lower() == USER_COMPOSE_SUFFIX
    )


class StartState(State):
    kind = StateKind.START

    def compose_files(self) -> list[str]:
        files = [COMPOSE_FILE]
        if not self.options.full_mode:
            files.append(COMPOSE_EVM_FILE)
        if self.options.user_compose:
            files.extend(user_compose_files(self.options.user_compose_dir))
        return files

    async def _compose_up(self) -> bool:
        result = await asyncio.to_thread(
            self.services.docker.compose_up, self.compose_files(), self.work_dir
        )
        if result.returncode != 0:
            self.logger.debug("docker compose up failed: %s", result.stderr)
        return result.returncode == 0

    async def on_start(self) -> None:
        self.logger.info("Starting Hedera Local Node...")

        if not await self._compose_up():
            # Recovery runs inside the observer before the single retry.
            await self.notify(EventType.DOCKER_ERROR)
            if not await self._compose_up():
                self.logger.error("docker compose up failed after recovery")
                await self.notify(EventType.UNKNOWN_ERROR)
                return

        self.logger.info("Detecting network...")
        connection = self.services.connection
        try:
            await connection.wait_for_firing_up(MIRROR_NODE_GRPC_PORT)
            await connection.wait_for_firing_up(CONSENSUS_NODE_PORT)
        except NodeConnectionError as exc:
            self.logger.error("%s", exc)
            await self.notify(EventType.UNKNOWN_ERROR)
            return

        show_status_board(self.services)
        self.logger.info("Hedera Local Node successfully started!")
        await self.notify(EventType.FINISH)
