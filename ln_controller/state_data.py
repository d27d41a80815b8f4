"""Workflow names mapped to their ordered state sequences."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from ln_controller.services.locator import ServiceLocator
from ln_controller.states import (
    AccountCreationState,
    AttachState,
    CleanUpState,
    DebugState,
    InitState,
    NetworkPrepState,
    ResourceCreationState,
    StartState,
    State,
    StateKind,
    StopState,
)

logger = logging.getLogger(__name__)

START = "start"
RESTART = "restart"
STOP = "stop"
ACCOUNT_CREATION = "accountCreation"
DEBUG = "debug"

WORKFLOWS: dict[str, tuple[StateKind, ...]] = {
    START: (
        StateKind.INIT,
        StateKind.START,
        StateKind.NETWORK_PREP,
        StateKind.ACCOUNT_CREATION,
        StateKind.CLEAN_UP,
        StateKind.ATTACH,
    ),
    RESTART: (
        StateKind.CLEAN_UP,
        StateKind.STOP,
        StateKind.INIT,
        StateKind.START,
        StateKind.NETWORK_PREP,
        StateKind.ACCOUNT_CREATION,
        StateKind.CLEAN_UP,
        StateKind.ATTACH,
    ),
    STOP: (StateKind.STOP,),
    ACCOUNT_CREATION: (StateKind.ACCOUNT_CREATION,),
    DEBUG: (StateKind.DEBUG,),
}

# Workflows that seed fixtures right after account generation when asked to.
RESOURCE_WORKFLOWS = frozenset({START, RESTART})

STATE_FACTORIES: dict[StateKind, Callable[[ServiceLocator], State]] = {
    StateKind.INIT: InitState,
    StateKind.START: StartState,
    StateKind.NETWORK_PREP: NetworkPrepState,
    StateKind.ACCOUNT_CREATION: AccountCreationState,
    StateKind.RESOURCE_CREATION: ResourceCreationState,
    StateKind.ATTACH: AttachState,
    StateKind.CLEAN_UP: CleanUpState,
    StateKind.STOP: StopState,
    StateKind.DEBUG: DebugState,
}


@dataclass(frozen=True)
class StateConfiguration:
    state_machine_name: str
    states: tuple[State, ...]

    @property
    def kinds(self) -> list[StateKind]:
        return [state.kind for state in self.states]


def workflow_kinds(name: str, *, create_initial_resources: bool = False) -> tuple[StateKind, ...] | None:
    """State kinds of workflow *name*, or None for an unknown workflow."""
    kinds = WORKFLOWS.get(name)
    if kinds is None:
        return None
    if create_initial_resources and name in RESOURCE_WORKFLOWS:
        position = kinds.index(StateKind.ACCOUNT_CREATION) + 1
        kinds = (*kinds[:position], StateKind.RESOURCE_CREATION, *kinds[position:])
    return kinds


class StateData:
    """Builds fresh state instances for one workflow run."""

    def __init__(self, services: ServiceLocator) -> None:
        self.services = services

    def get_selected_state_configuration(self, name: str) -> StateConfiguration | None:
        options = self.services.cli.current_options()
        kinds = workflow_kinds(name, create_initial_resources=options.create_initial_resources)
        if kinds is None:
            logger.debug("No state configuration for workflow %s", name)
            return None
        return StateConfiguration(
            state_machine_name=name,
            states=tuple(STATE_FACTORIES[kind](self.services) for kind in kinds),
        )
