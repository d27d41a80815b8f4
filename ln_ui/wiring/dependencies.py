from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from ln_common.api import configure_logging
from ln_controller.api import (
    CLIOptions,
    NodeOutput,
    ServiceLocator,
    StateController,
    bootstrap,
)
from ln_ui.tui.adapters.tui_adapter import TUIAdapter
from ln_ui.tui.system.facade import TUI
from ln_ui.tui.system.protocols import UI

ServicesFactory = Callable[[CLIOptions, NodeOutput], ServiceLocator]
ControllerFactory = Callable[[str, ServiceLocator], StateController]


@dataclass
class UIContext:
    """Container for UI services and state, initialized lazily."""
    headless: bool = False

    # Lazily initialized services
    _ui: Optional[UI] = None
    _node_output: Optional[NodeOutput] = None

    # Replaceable in tests
    services_factory: ServicesFactory = bootstrap
    controller_factory: ControllerFactory = StateController

    @property
    def ui(self) -> UI:
        if self._ui is None:
            if self.headless:
                from ln_ui.tui.system.headless import HeadlessUI
                self._ui = HeadlessUI()
            else:
                self._ui = TUI()
        return self._ui

    @ui.setter
    def ui(self, value: UI):
        self._ui = value

    @property
    def node_output(self) -> NodeOutput:
        if self._node_output is None:
            self._node_output = TUIAdapter(self.ui)
        return self._node_output

    @node_output.setter
    def node_output(self, value: NodeOutput):
        self._node_output = value

    def build_controller(self, workflow: str, options: CLIOptions) -> StateController:
        services = self.services_factory(options, self.node_output)
        return self.controller_factory(workflow, services)


__all__ = [
    "UIContext",
    "configure_logging",
]
