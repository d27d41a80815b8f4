"""Follow the node logs in the foreground unless running detached."""

from __future__ import annotations

import asyncio
import os
import threading
import time

from ln_common.errors import DockerServiceError
from ln_controller.constants import (
    CONSENSUS_NODE_LABEL,
    IGNORED_LOG_FRAGMENT,
    MIRROR_NODE_LABEL,
    PID_FILE_NAME,
    RELAY_LABEL,
)
from ln_controller.events import EventType
from ln_controller.services.locator import ServiceLocator
from ln_controller.states.base import State, StateKind, show_status_board

ATTACHED_CONTAINERS = (CONSENSUS_NODE_LABEL, MIRROR_NODE_LABEL, RELAY_LABEL)


class AttachState(State):
    kind = StateKind.ATTACH

    refresh_interval: float = 10.0
    max_refreshes: int | None = None

    def __init__(self, services: ServiceLocator) -> None:
        super().__init__(services)
        self.followers: list[threading.Thread] = []

    async def on_start(self) -> None:
        if self.options.detached:
            await self.notify(EventType.FINISH)
            return

        self.write_pid_file()
        since = time.time()
        for label in ATTACHED_CONTAINERS:
            self.start_follower(label, since)

        refreshes = 0
        while self.max_refreshes is None or refreshes < self.max_refreshes:
            show_status_board(self.services)
            refreshes += 1
            await asyncio.sleep(self.refresh_interval)

    def start_follower(self, label: str, since: float) -> threading.Thread:
        # Daemon threads: a blocked log stream must not keep the process alive on Ctrl-C.
        thread = threading.Thread(
            target=self.attach_container_logs,
            args=(label, since),
            name=f"ln-attach-{label}",
            daemon=True,
        )
        thread.start()
        self.followers.append(thread)
        return thread

    def write_pid_file(self) -> None:
        pid_file = self.work_dir / PID_FILE_NAME
        pid_file.parent.mkdir(parents=True, exist_ok=True)
        pid_file.write_text(str(os.getpid()), encoding="utf-8")

    def attach_container_logs(self, label: str, since: float) -> None:
        output = self.services.output
        try:
            for line in self.services.docker.stream_logs(label, since):
                if IGNORED_LOG_FRAGMENT in line:
                    continue
                output.attach_log(line, label)
        except DockerServiceError as exc:
            self.logger.error("Cannot attach to %s logs: %s", label, exc)
