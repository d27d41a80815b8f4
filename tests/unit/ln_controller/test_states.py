"""Behavior of the individual workflow states against mocked services."""

from __future__ import annotations

import asyncio
import os
import subprocess
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
import yaml

from ln_common.errors import DockerServiceError, NodeConnectionError
from ln_controller.constants import PID_FILE_NAME, RECORD_PARSER_COMMAND
from ln_controller.events import EventType
from ln_controller.models.cli_options import CLIOptions
from ln_controller.models.network_config import ConfigEntry, load_original_node_configuration
from ln_controller.states.cleanup import CleanUpState
from ln_controller.states.debug import DebugState
from ln_controller.states.recovery import RecoveryState
from ln_controller.states.start import StartState, user_compose_files
from ln_controller.states.stop import StopState
from ln_controller.utils.node_files import (
    bootstrap_properties_path,
    configure_mirror_application,
    mirror_application_path,
    save_mirror_application,
    write_bootstrap_properties,
)

pytestmark = pytest.mark.unit_controller


class Recorder:
    def __init__(self) -> None:
        self.events: list[EventType] = []

    async def update(self, event: EventType) -> None:
        self.events.append(event)


def _run(state) -> list[EventType]:
    recorder = Recorder()
    state.subscribe(recorder)
    asyncio.run(state.on_start())
    return recorder.events


def _completed(code: int) -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess(["docker"], code, "", "" if code == 0 else "failed")


def _with_connection(services, side_effect=None):
    connection = SimpleNamespace(wait_for_firing_up=AsyncMock(side_effect=side_effect))
    services.register(connection, "ConnectionService")
    return connection


def test_user_compose_files_are_sorted_yml_only(tmp_path):
    for name in ("b.yml", "a.YML", "notes.txt"):
        (tmp_path / name).write_text("services: {}")
    (tmp_path / "nested.yml").mkdir()

    files = user_compose_files(tmp_path)

    assert [os.path.basename(path) for path in files] == ["a.YML", "b.yml"]
    assert all(os.path.isabs(path) for path in files)
    assert user_compose_files(tmp_path / "missing") == []


def test_compose_files_follow_mode_flags(tmp_path, make_services):
    overrides = tmp_path / "overrides"
    overrides.mkdir()
    (overrides / "extra.yml").write_text("services: {}")

    turbo = StartState(make_services(CLIOptions(work_dir=tmp_path, user_compose_dir=str(overrides))))
    full = StartState(
        make_services(CLIOptions(work_dir=tmp_path, full_mode=True, user_compose=False))
    )

    assert turbo.compose_files() == [
        "docker-compose.yml",
        "docker-compose.evm.yml",
        str((overrides / "extra.yml").resolve()),
    ]
    assert full.compose_files() == ["docker-compose.yml"]


def test_start_waits_for_both_ports(services):
    services.docker.compose_up.return_value = _completed(0)
    services.docker.status_rows.return_value = []
    connection = _with_connection(services)

    events = _run(StartState(services))

    assert events == [EventType.FINISH]
    ports = [call.args[0] for call in connection.wait_for_firing_up.await_args_list]
    assert ports == [5600, 50211]
    assert services.output.tables[-1][0] == "Local Node Status"


def test_start_reports_docker_error_then_retries(services):
    services.docker.compose_up.side_effect = [_completed(1), _completed(0)]
    services.docker.status_rows.return_value = []
    _with_connection(services)

    events = _run(StartState(services))

    assert events == [EventType.DOCKER_ERROR, EventType.FINISH]
    assert services.docker.compose_up.call_count == 2


def test_start_gives_up_when_retry_fails(services):
    services.docker.compose_up.return_value = _completed(1)
    connection = _with_connection(services)

    events = _run(StartState(services))

    assert events == [EventType.DOCKER_ERROR, EventType.UNKNOWN_ERROR]
    connection.wait_for_firing_up.assert_not_awaited()


def test_start_connection_failure_is_unknown_error(services):
    services.docker.compose_up.return_value = _completed(0)
    _with_connection(services, side_effect=NodeConnectionError(5600))

    assert _run(StartState(services)) == [EventType.UNKNOWN_ERROR]


def test_recovery_tears_down_and_reports_unknown_error(services, tmp_path):
    logs = tmp_path / "network-logs" / "node"
    logs.mkdir(parents=True)
    (logs / "hgcaa.log").write_text("log")

    events = _run(RecoveryState(services, EventType.DOCKER_ERROR))

    assert events == [EventType.UNKNOWN_ERROR]
    services.docker.compose_down.assert_called_once_with(tmp_path)
    services.docker.prune_networks.assert_called_once()
    assert (tmp_path / "network-logs").is_dir()
    assert list((tmp_path / "network-logs").iterdir()) == []


def test_recovery_without_docker_error_only_reports(services):
    events = _run(RecoveryState(services, EventType.UNKNOWN_ERROR))

    assert events == [EventType.UNKNOWN_ERROR]
    services.docker.compose_down.assert_not_called()


def _write_modified_configuration(work_dir):
    original = load_original_node_configuration()
    write_bootstrap_properties(
        bootstrap_properties_path(work_dir),
        original,
        [ConfigEntry(key="contracts.chainId", value=298), ConfigEntry(key="hedera.recordStream.enabled", value=True)],
    )
    mirror_path = mirror_application_path(work_dir)
    mirror_path.parent.mkdir(parents=True, exist_ok=True)
    save_mirror_application(
        mirror_path,
        configure_mirror_application({}, original, turbo_mode=True, debug_mode=True),
    )
    return original


def test_cleanup_restores_pristine_files(services, tmp_path):
    original = _write_modified_configuration(tmp_path)

    events = _run(CleanUpState(services))

    assert events == [EventType.FINISH]
    assert bootstrap_properties_path(tmp_path).read_text() == original.render_bootstrap_properties()
    mirror = yaml.safe_load(mirror_application_path(tmp_path).read_text())
    importer = mirror["hedera"]["mirror"]["importer"]
    assert "dataPath" not in importer
    assert "sources" not in importer["downloader"]
    assert "local" not in importer["downloader"]
    assert mirror["hedera"]["mirror"]["monitor"]["nodes"] == original.full_node_properties


def test_cleanup_is_idempotent(services, tmp_path):
    _write_modified_configuration(tmp_path)

    _run(CleanUpState(services))
    first = (
        bootstrap_properties_path(tmp_path).read_text(),
        mirror_application_path(tmp_path).read_text(),
    )
    _run(CleanUpState(services))
    second = (
        bootstrap_properties_path(tmp_path).read_text(),
        mirror_application_path(tmp_path).read_text(),
    )

    assert first == second


def test_cleanup_without_files_or_observer_is_quiet(services, tmp_path):
    asyncio.run(CleanUpState(services).on_start())

    assert not bootstrap_properties_path(tmp_path).exists()


def test_stop_tears_down_and_removes_pid_file(services, tmp_path):
    (tmp_path / "network-logs" / "node").mkdir(parents=True)
    (tmp_path / PID_FILE_NAME).write_text(str(os.getpid()))
    remover = MagicMock()
    remover.remove_all.return_value = ["0123456789ab"]

    events = _run(StopState(services, network_remover=remover))

    assert events == [EventType.FINISH]
    services.docker.compose_down.assert_called_once_with(tmp_path)
    services.docker.prune_networks.assert_called_once()
    remover.remove_all.assert_called_once()
    assert not (tmp_path / "network-logs").exists()
    assert not (tmp_path / PID_FILE_NAME).exists()


def test_stop_ignores_malformed_pid_file(services, tmp_path):
    (tmp_path / PID_FILE_NAME).write_text("not-a-pid")

    StopState(services, network_remover=MagicMock()).stop_attached_process()

    assert not (tmp_path / PID_FILE_NAME).exists()


def test_debug_requires_debug_mode(tmp_path, make_services):
    services = make_services(CLIOptions(work_dir=tmp_path, timestamp="1696332095.000000000"))

    assert _run(DebugState(services)) == [EventType.UNRESOLVABLE_ERROR]
    services.docker.exec_in_container.assert_not_called()


def test_debug_rejects_bad_timestamp(tmp_path, make_services):
    services = make_services(CLIOptions(work_dir=tmp_path, timestamp="yesterday", enable_debug=True))

    assert _run(DebugState(services)) == [EventType.UNRESOLVABLE_ERROR]


def test_debug_parses_matching_record_file(tmp_path, monkeypatch, make_services):
    monkeypatch.delenv("STREAM_EXTENSION", raising=False)
    services = make_services(CLIOptions(work_dir=tmp_path, timestamp="1696332095.000000000"))
    state = DebugState(services)
    state.record_dir.mkdir(parents=True)
    name = "2023-10-03T11_21_35.000000000Z"
    (state.record_dir / f"{name}.rcd").write_text("record")
    (state.record_dir / f"{name}.rcd_sig").write_text("sig")
    copied = []
    services.docker.exec_in_container.side_effect = lambda *_args: copied.extend(
        sorted(entry.name for entry in state.temp_dir.iterdir())
    )

    assert _run(state) == [EventType.FINISH]
    services.docker.exec_in_container.assert_called_once_with("network-node", list(RECORD_PARSER_COMMAND))
    assert copied == [f"{name}.rcd", f"{name}.rcd_sig"]
    assert list(state.temp_dir.iterdir()) == []


def test_debug_cleanup_keeps_the_scratch_gitignore(tmp_path, monkeypatch, make_services):
    monkeypatch.delenv("STREAM_EXTENSION", raising=False)
    services = make_services(CLIOptions(work_dir=tmp_path, timestamp="1696332095.000000000", enable_debug=True))
    state = DebugState(services)
    state.record_dir.mkdir(parents=True)
    (state.record_dir / "2023-10-03T11_21_35.000000000Z.rcd").write_text("record")
    state.temp_dir.mkdir(parents=True)
    (state.temp_dir / ".gitignore").write_text("*\n")

    assert _run(state) == [EventType.FINISH]
    assert [entry.name for entry in state.temp_dir.iterdir()] == [".gitignore"]


def test_debug_parser_failure_is_unresolvable(tmp_path, make_services):
    services = make_services(CLIOptions(work_dir=tmp_path, timestamp="1696332095.000000000", enable_debug=True))
    state = DebugState(services)
    state.record_dir.mkdir(parents=True)
    (state.record_dir / "2023-10-03T11_21_35.000000000Z.rcd").write_text("record")
    services.docker.exec_in_container.side_effect = DockerServiceError("parser failed")

    assert _run(state) == [EventType.UNRESOLVABLE_ERROR]
    assert list(state.temp_dir.iterdir()) == []
