"""State contract shared by every workflow phase."""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path
from typing import Any, ClassVar, Coroutine

from ln_common.errors import StateError
from ln_controller.events import EventType, Observer
from ln_controller.models.cli_options import CLIOptions
from ln_controller.services.locator import ServiceLocator


class StateKind(str, Enum):
    """Closed set of workflow phases."""

    INIT = "InitState"
    START = "StartState"
    NETWORK_PREP = "NetworkPrepState"
    ACCOUNT_CREATION = "AccountCreationState"
    RESOURCE_CREATION = "ResourceCreationState"
    ATTACH = "AttachState"
    CLEAN_UP = "CleanUpState"
    RECOVERY = "RecoveryState"
    STOP = "StopState"
    DEBUG = "DebugState"


class State(ABC):
    """One phase of a workflow.

    A state holds a single observer slot. `on_start` performs the phase and
    reports its outcome exactly once through `notify`.
    """

    kind: ClassVar[StateKind]

    def __init__(self, services: ServiceLocator) -> None:
        self.services = services
        self.options: CLIOptions = services.cli.current_options()
        self._observer: Observer | None = None
        self._tasks: list[asyncio.Task] = []
        self.logger = logging.LoggerAdapter(
            logging.getLogger(type(self).__module__), {"state": self.kind.value}
        )

    @property
    def work_dir(self) -> Path:
        return Path(self.options.work_dir)

    @property
    def observer(self) -> Observer:
        if self._observer is None:
            raise StateError(
                f"{self.kind.value} started without a subscribed observer",
                context={"state": self.kind.value},
            )
        return self._observer

    @property
    def has_observer(self) -> bool:
        return self._observer is not None

    def subscribe(self, observer: Observer) -> None:
        """Register the observer; a different observer cannot take the slot over."""
        if self._observer is not None and self._observer is not observer:
            raise StateError(
                f"{self.kind.value} already has an observer",
                context={"state": self.kind.value},
            )
        self._observer = observer

    async def notify(self, event: EventType) -> None:
        await self.observer.update(event)

    def spawn(self, coro: Coroutine[Any, Any, Any]) -> asyncio.Task:
        """Run *coro* in the background; the controller awaits it before exiting."""
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.append(task)
        return task

    @property
    def pending_tasks(self) -> list[asyncio.Task]:
        return [task for task in self._tasks if not task.done()]

    @abstractmethod
    async def on_start(self) -> None:
        """Run the phase."""

    def __repr__(self) -> str:
        return f"<{self.kind.value}>"


STATUS_COLUMNS = ("Service", "Version", "Endpoint")


def show_status_board(services: ServiceLocator) -> None:
    """Render name, version and endpoint of every service container."""
    rows = [list(row) for row in services.docker.status_rows()]
    services.output.show_table("Local Node Status", STATUS_COLUMNS, rows)
