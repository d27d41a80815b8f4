"""Build the service container for one invocation."""

from __future__ import annotations

from ln_controller.models.cli_options import CLIOptions
from ln_controller.services.account_service import AccountService
from ln_controller.services.cli_service import CLIService
from ln_controller.services.client_service import ClientService
from ln_controller.services.connection_service import ConnectionService
from ln_controller.services.docker_service import DockerService
from ln_controller.services.locator import OUTPUT_SERVICE, ServiceLocator
from ln_controller.ui_interfaces import NodeOutput, NoOpNodeOutput


def bootstrap(options: CLIOptions, output: NodeOutput | None = None) -> ServiceLocator:
    """Register every service, in dependency order, on a fresh locator."""
    sink = output or NoOpNodeOutput()
    locator = ServiceLocator()
    locator.register(sink, OUTPUT_SERVICE)
    locator.register(CLIService(options))
    locator.register(DockerService(options))
    locator.register(ConnectionService(options))
    client_service = ClientService(options)
    locator.register(client_service)
    locator.register(AccountService(client_service, sink))
    return locator
