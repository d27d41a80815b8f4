"""Docker-level remediation after a failed compose start."""

from __future__ import annotations

import asyncio
import shutil
from pathlib import Path

from ln_common.logging import TRACE
from ln_controller.constants import NETWORK_LOGS_DIR
from ln_controller.events import EventType
from ln_controller.services.docker_service import DockerService
from ln_controller.services.locator import ServiceLocator
from ln_controller.states.base import State, StateKind


def clear_network_logs(work_dir: Path) -> None:
    """Remove everything below the network-logs directory, keeping the directory."""
    logs_dir = work_dir / NETWORK_LOGS_DIR
    if not logs_dir.is_dir():
        return
    for entry in logs_dir.iterdir():
        if entry.is_dir() and not entry.is_symlink():
            shutil.rmtree(entry, ignore_errors=True)
        else:
            entry.unlink(missing_ok=True)


def tear_down_stack(docker: DockerService, work_dir: Path) -> None:
    docker.compose_down(work_dir)
    clear_network_logs(work_dir)
    docker.prune_networks()


class RecoveryState(State):
    """Always reports UnknownError once remediation has been attempted."""

    kind = StateKind.RECOVERY

    def __init__(self, services: ServiceLocator, event: EventType) -> None:
        super().__init__(services)
        self.event = event

    async def on_start(self) -> None:
        self.logger.info("Starting Recovery State...")
        if self.event is EventType.DOCKER_ERROR:
            await self.try_docker_recovery()
        await self.notify(EventType.UNKNOWN_ERROR)

    async def try_docker_recovery(self) -> None:
        self.logger.log(TRACE, "Stopping the docker containers and cleaning the volumes and temp files...")
        await asyncio.to_thread(tear_down_stack, self.services.docker, self.work_dir)
        self.logger.info("Trying to startup again...")
