"""Services shared by the controller and its states."""

from ln_controller.services.account_service import AccountService, GenerationStrategy
from ln_controller.services.bootstrap import bootstrap
from ln_controller.services.cli_service import CLIService
from ln_controller.services.client_service import ClientService, LedgerGateway
from ln_controller.services.connection_service import ConnectionService
from ln_controller.services.docker_service import DockerService, PortReport
from ln_controller.services.locator import ServiceLocator

__all__ = [
    "AccountService",
    "CLIService",
    "ClientService",
    "ConnectionService",
    "DockerService",
    "GenerationStrategy",
    "LedgerGateway",
    "PortReport",
    "ServiceLocator",
    "bootstrap",
]
