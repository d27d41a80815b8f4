"""CLI wiring tests: commands resolve options and run the matching workflow."""

from __future__ import annotations

import importlib

import pytest
from typer.testing import CliRunner

from ln_ui.cli.commands import network as network_commands
from ln_ui.tui.system.headless import HeadlessUI

# `ln_ui.cli.main` is shadowed by the `main` entrypoint re-exported from ln_ui.cli.
cli_main = importlib.import_module("ln_ui.cli.main")

pytestmark = pytest.mark.unit_ui

runner = CliRunner()


class FakeController:
    def __init__(self, workflow, services, code):
        self.workflow = workflow
        self.services = services
        self.code = code

    async def run(self) -> int:
        return self.code


@pytest.fixture
def harness(monkeypatch):
    recorded = {"controllers": [], "options": [], "code": 0}
    ui = HeadlessUI()

    def services_factory(options, output):
        recorded["options"].append(options)
        return {"output": output}

    def controller_factory(workflow, services):
        controller = FakeController(workflow, services, recorded["code"])
        recorded["controllers"].append(controller)
        return controller

    store = cli_main.ctx_store
    monkeypatch.setattr(store, "_ui", ui)
    monkeypatch.setattr(store, "_node_output", None)
    monkeypatch.setattr(store, "services_factory", services_factory)
    monkeypatch.setattr(store, "controller_factory", controller_factory)
    monkeypatch.setattr(cli_main, "configure_logging", lambda **_kwargs: None)
    monkeypatch.setattr(network_commands, "configure_logging", lambda **_kwargs: None)
    recorded["ui"] = ui
    return recorded


def test_help_lists_commands():
    result = runner.invoke(cli_main.app, ["--help"])

    assert result.exit_code == 0
    for command in ("start", "stop", "restart", "generate-accounts", "debug"):
        assert command in result.stdout


def test_start_runs_start_workflow(harness, tmp_path):
    result = runner.invoke(
        cli_main.app,
        ["start", "5", "--async", "--network", "testnet", "--dev", "--workdir", str(tmp_path)],
    )

    assert result.exit_code == 0, result.stdout
    assert [c.workflow for c in harness["controllers"]] == ["start"]
    options = harness["options"][0]
    assert options.accounts == 5
    assert options.async_mode is True
    assert options.network.value == "testnet"
    assert options.dev_mode is True
    assert options.startup is True
    assert options.work_dir == tmp_path.resolve()


def test_restart_forwards_initial_resources_flag(harness, tmp_path):
    result = runner.invoke(
        cli_main.app,
        ["restart", "--create-initial-resources", "--detached", "--workdir", str(tmp_path)],
    )

    assert result.exit_code == 0
    assert harness["controllers"][0].workflow == "restart"
    assert harness["options"][0].create_initial_resources is True
    assert harness["options"][0].detached is True


@pytest.mark.parametrize(
    ("argv", "workflow"),
    [
        (["stop"], "stop"),
        (["generate-accounts", "3"], "accountCreation"),
        (["debug", "1696332095.000000000"], "debug"),
    ],
)
def test_non_startup_commands_run_detached(harness, tmp_path, argv, workflow):
    result = runner.invoke(cli_main.app, [*argv, "--workdir", str(tmp_path)])

    assert result.exit_code == 0
    assert harness["controllers"][0].workflow == workflow
    assert harness["options"][0].startup is False
    assert harness["options"][0].detached is True


def test_debug_forwards_timestamp(harness, tmp_path):
    runner.invoke(cli_main.app, ["debug", "1696332095-000000000", "--workdir", str(tmp_path)])

    assert harness["options"][0].timestamp == "1696332095-000000000"


def test_failed_workflow_exits_with_its_code(harness, tmp_path):
    harness["code"] = 1

    result = runner.invoke(cli_main.app, ["start", "--workdir", str(tmp_path)])

    assert result.exit_code == 1
    assert "ERROR: `start` failed, see the log output above." in harness["ui"].recorded_messages


def test_invalid_options_exit_before_running(harness, tmp_path):
    result = runner.invoke(cli_main.app, ["start", "--balance", "-5", "--workdir", str(tmp_path)])

    assert result.exit_code == 1
    assert harness["controllers"] == []
    assert harness["ui"].recorded_messages[0].startswith("ERROR: Invalid options for `start`")


def test_controller_output_goes_through_ui_adapter(harness, tmp_path):
    runner.invoke(cli_main.app, ["stop", "--workdir", str(tmp_path)])

    output = harness["controllers"][0].services["output"]
    output.show_info("Hedera Local Node was stopped successfully.")
    assert harness["ui"].recorded_messages[-1] == "INFO: Hedera Local Node was stopped successfully."
