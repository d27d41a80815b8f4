from __future__ import annotations

import pytest

from ln_controller.models.cli_options import CLIOptions
from ln_controller.state_data import (
    ACCOUNT_CREATION,
    DEBUG,
    RESTART,
    START,
    STOP,
    StateData,
    workflow_kinds,
)
from ln_controller.states import (
    AccountCreationState,
    AttachState,
    CleanUpState,
    InitState,
    NetworkPrepState,
    StartState,
    StateKind,
)

pytestmark = pytest.mark.unit_controller


def test_start_workflow_order():
    assert workflow_kinds(START) == (
        StateKind.INIT,
        StateKind.START,
        StateKind.NETWORK_PREP,
        StateKind.ACCOUNT_CREATION,
        StateKind.CLEAN_UP,
        StateKind.ATTACH,
    )


def test_restart_begins_with_cleanup_and_stop():
    kinds = workflow_kinds(RESTART)
    assert kinds[:3] == (StateKind.CLEAN_UP, StateKind.STOP, StateKind.INIT)
    assert kinds[3:] == workflow_kinds(START)[1:]


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        (STOP, (StateKind.STOP,)),
        (ACCOUNT_CREATION, (StateKind.ACCOUNT_CREATION,)),
        (DEBUG, (StateKind.DEBUG,)),
    ],
)
def test_single_state_workflows(name, expected):
    assert workflow_kinds(name) == expected


def test_initial_resources_insert_resource_creation_after_accounts():
    for name in (START, RESTART):
        kinds = workflow_kinds(name, create_initial_resources=True)
        position = kinds.index(StateKind.ACCOUNT_CREATION)
        assert kinds[position + 1] is StateKind.RESOURCE_CREATION
        assert len(kinds) == len(workflow_kinds(name)) + 1


def test_initial_resources_do_not_touch_other_workflows():
    assert workflow_kinds(STOP, create_initial_resources=True) == (StateKind.STOP,)


def test_unknown_workflow_has_no_configuration(services):
    assert workflow_kinds("bogus") is None
    assert StateData(services).get_selected_state_configuration("bogus") is None


def test_configuration_builds_fresh_state_instances(tmp_path, make_services):
    services = make_services(CLIOptions(work_dir=tmp_path))

    first = StateData(services).get_selected_state_configuration(START)
    second = StateData(services).get_selected_state_configuration(START)

    assert first.state_machine_name == START
    assert [type(state) for state in first.states] == [
        InitState,
        StartState,
        NetworkPrepState,
        AccountCreationState,
        CleanUpState,
        AttachState,
    ]
    assert first.states[0] is not second.states[0]
    assert first.states[4] is not first.states[0]
