"""Controller facade for the local node workflows.

Re-exports the state machine and its service container so the CLI only
depends on this package surface.
"""

from ln_controller.controller import StateController
from ln_controller.events import EventType
from ln_controller.models import CLIOptions
from ln_controller.services import ServiceLocator, bootstrap
from ln_controller.state_data import StateData

__all__ = [
    "CLIOptions",
    "EventType",
    "ServiceLocator",
    "StateController",
    "StateData",
    "bootstrap",
]
