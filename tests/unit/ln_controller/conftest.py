from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from ln_controller.models.cli_options import CLIOptions
from ln_controller.services.cli_service import CLIService
from ln_controller.services.locator import OUTPUT_SERVICE, ServiceLocator


class RecordingOutput:
    """NodeOutput double keeping everything it was asked to show."""

    def __init__(self) -> None:
        self.messages: list[tuple[str, str]] = []
        self.tables: list[tuple[str, list[str], list[list[str]]]] = []
        self.logs: list[tuple[str, str]] = []

    def show_info(self, message: str) -> None:
        self.messages.append(("info", message))

    def show_warning(self, message: str) -> None:
        self.messages.append(("warning", message))

    def show_error(self, message: str) -> None:
        self.messages.append(("error", message))

    def show_success(self, message: str) -> None:
        self.messages.append(("success", message))

    def show_table(self, title, columns, rows) -> None:
        self.tables.append((title, list(columns), [list(row) for row in rows]))

    def attach_log(self, line: str, source: str) -> None:
        self.logs.append((source, line))


def build_services(options: CLIOptions) -> ServiceLocator:
    services = ServiceLocator()
    services.register(RecordingOutput(), OUTPUT_SERVICE)
    services.register(CLIService(options))
    services.register(MagicMock(name="docker"), "DockerService")
    return services


@pytest.fixture
def options(tmp_path) -> CLIOptions:
    return CLIOptions(work_dir=tmp_path)


@pytest.fixture
def services(options) -> ServiceLocator:
    return build_services(options)


@pytest.fixture
def make_services():
    """Factory building a locator around custom options."""
    return build_services


@pytest.fixture
def recording_output() -> RecordingOutput:
    return RecordingOutput()
