"""Revert the node configuration files to their pristine contents."""

from __future__ import annotations

from ln_common.errors import ConfigurationError
from ln_common.logging import TRACE
from ln_controller.events import EventType
from ln_controller.models.network_config import (
    OriginalNodeConfiguration,
    load_original_node_configuration,
)
from ln_controller.services.locator import ServiceLocator
from ln_controller.states.base import State, StateKind
from ln_controller.utils.node_files import (
    bootstrap_properties_path,
    load_mirror_application,
    mirror_application_path,
    revert_mirror_application,
    save_mirror_application,
    write_bootstrap_properties,
)


class CleanUpState(State):
    """Runs as a regular workflow step and as the terminal step of a failed run.

    Both reverts rewrite from the original snapshot, so running them again
    leaves the files unchanged.
    """

    kind = StateKind.CLEAN_UP

    def __init__(
        self, services: ServiceLocator, original: OriginalNodeConfiguration | None = None
    ) -> None:
        super().__init__(services)
        self._original = original

    @property
    def original(self) -> OriginalNodeConfiguration:
        if self._original is None:
            self._original = load_original_node_configuration()
        return self._original

    async def on_start(self) -> None:
        self.logger.info("Initiating clean up procedure. Trying to revert unneeded changes to files...")
        try:
            self.revert_node_properties()
            self.revert_mirror_node_properties()
        except (ConfigurationError, OSError) as exc:
            self.logger.error("Clean up failed: %s", exc)
        if self.has_observer:
            await self.notify(EventType.FINISH)

    def revert_node_properties(self) -> None:
        self.logger.log(TRACE, "Clean up unneeded bootstrap properties.")
        path = bootstrap_properties_path(self.work_dir)
        if not path.exists():
            self.logger.log(TRACE, "Node Properties File doesn't exist at path %s", path)
            return
        write_bootstrap_properties(path, self.original)
        self.logger.info("Clean up of consensus node properties finished.")

    def revert_mirror_node_properties(self) -> None:
        self.logger.log(TRACE, "Clean up unneeded mirror node properties...")
        path = mirror_application_path(self.work_dir)
        if not path.exists():
            self.logger.log(TRACE, "Mirror Node Properties File doesn't exist at path %s", path)
            return
        application = revert_mirror_application(load_mirror_application(path), self.original)
        save_mirror_application(path, application)
        self.logger.info("Clean up of mirror node properties finished.")
