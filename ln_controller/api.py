"""Public controller API surface."""

from ln_controller.controller import StateController, Transition, decide_transition
from ln_controller.events import EventType, Observer
from ln_controller.models import AccountRecord, AccountType, CLIOptions, NetworkType, VerboseLevel
from ln_controller.services import (
    AccountService,
    CLIService,
    ClientService,
    ConnectionService,
    DockerService,
    LedgerGateway,
    ServiceLocator,
    bootstrap,
)
from ln_controller.state_data import StateConfiguration, StateData, WORKFLOWS
from ln_controller.states import State, StateKind
from ln_controller.ui_interfaces import NodeOutput, NoOpNodeOutput

__all__ = [
    "AccountRecord",
    "AccountService",
    "AccountType",
    "CLIOptions",
    "CLIService",
    "ClientService",
    "ConnectionService",
    "DockerService",
    "EventType",
    "LedgerGateway",
    "NetworkType",
    "NoOpNodeOutput",
    "NodeOutput",
    "Observer",
    "ServiceLocator",
    "State",
    "StateConfiguration",
    "StateController",
    "StateData",
    "StateKind",
    "Transition",
    "VerboseLevel",
    "WORKFLOWS",
    "bootstrap",
    "decide_transition",
]
