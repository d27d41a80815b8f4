"""Workflow phases driven by the state controller."""

from ln_controller.states.account_creation import AccountCreationState
from ln_controller.states.attach import AttachState
from ln_controller.states.base import State, StateKind
from ln_controller.states.cleanup import CleanUpState
from ln_controller.states.debug import DebugState
from ln_controller.states.init import InitState
from ln_controller.states.network_prep import NetworkPrepState
from ln_controller.states.recovery import RecoveryState
from ln_controller.states.resource_creation import ResourceCreationState
from ln_controller.states.start import StartState
from ln_controller.states.stop import StopState

__all__ = [
    "AccountCreationState",
    "AttachState",
    "CleanUpState",
    "DebugState",
    "InitState",
    "NetworkPrepState",
    "RecoveryState",
    "ResourceCreationState",
    "StartState",
    "State",
    "StateKind",
    "StopState",
]
