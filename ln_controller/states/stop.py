"""Stop the network and remove what a run left behind."""

from __future__ import annotations

import asyncio
import os
import shutil
import signal

from ln_common.logging import TRACE
from ln_controller.constants import NETWORK_LOGS_DIR, PID_FILE_NAME
from ln_controller.events import EventType
from ln_controller.services.locator import ServiceLocator
from ln_controller.states.base import State, StateKind
from ln_controller.utils.network_remover import SafeDockerNetworkRemover


class StopState(State):
    kind = StateKind.STOP

    def __init__(
        self, services: ServiceLocator, network_remover: SafeDockerNetworkRemover | None = None
    ) -> None:
        super().__init__(services)
        self.network_remover = network_remover or SafeDockerNetworkRemover()

    async def on_start(self) -> None:
        self.logger.info("Initiating stop procedure. Trying to stop docker containers and clean up volumes...")
        await asyncio.to_thread(self.stop_network)
        self.stop_attached_process()
        self.logger.info("Hedera Local Node was stopped successfully.")
        await self.notify(EventType.FINISH)

    def stop_network(self) -> None:
        docker = self.services.docker
        self.logger.info("Stopping the network...")
        self.logger.log(TRACE, "Stopping the docker containers...")
        docker.compose_down(self.work_dir)
        self.logger.log(TRACE, "Cleaning the volumes and temp files...")
        shutil.rmtree(self.work_dir / NETWORK_LOGS_DIR, ignore_errors=True)
        removed = self.network_remover.remove_all()
        self.logger.log(TRACE, "Removed docker networks: %s", ", ".join(removed) or "none")
        docker.prune_networks()

    def stop_attached_process(self) -> None:
        """Terminate the foreground process recorded by a previous attached start."""
        pid_file = self.work_dir / PID_FILE_NAME
        if not pid_file.exists():
            return
        try:
            pid = int(pid_file.read_text(encoding="utf-8").strip())
        except ValueError:
            self.logger.warning("Ignoring malformed pid file %s", pid_file)
        else:
            if pid != os.getpid():
                try:
                    os.kill(pid, signal.SIGTERM)
                except ProcessLookupError:
                    self.logger.log(TRACE, "Process %s is not running", pid)
                except PermissionError:
                    self.logger.warning("Not allowed to stop process %s", pid)
        pid_file.unlink(missing_ok=True)
