"""Dependency container shared by the controller and every state."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, TypeVar

from ln_common.errors import ServiceRegistryError
from ln_common.logging import TRACE

if TYPE_CHECKING:
    from ln_controller.services.account_service import AccountService
    from ln_controller.services.cli_service import CLIService
    from ln_controller.services.client_service import ClientService
    from ln_controller.services.connection_service import ConnectionService
    from ln_controller.services.docker_service import DockerService
    from ln_controller.ui_interfaces import NodeOutput

logger = logging.getLogger(__name__)

T = TypeVar("T")

OUTPUT_SERVICE = "NodeOutput"


class ServiceLocator:
    """Name-keyed registry of service singletons.

    One locator is built per invocation by `bootstrap` and handed to the
    controller and state constructors. Registration happens serially before
    the workflow starts; afterwards the registry is only read.
    """

    def __init__(self) -> None:
        self._services: dict[str, Any] = {}

    def register(self, service: Any, name: str | None = None) -> None:
        """Register *service* under *name* (defaults to its class name)."""
        key = name or type(service).__name__
        if key in self._services:
            raise ServiceRegistryError(
                f"{key} is already registered with {type(self).__name__}",
                context={"service": key},
            )
        self._services[key] = service
        logger.log(TRACE, "Registered service %s", key)

    def get(self, name: str) -> Any:
        try:
            return self._services[name]
        except KeyError:
            raise ServiceRegistryError(
                f"{name} not registered with {type(self).__name__}",
                context={"service": name},
            ) from None

    def resolve(self, service_type: type[T]) -> T:
        """Typed lookup keyed by the class name of *service_type*."""
        return self.get(service_type.__name__)

    def unregister(self, name: str) -> None:
        if name not in self._services:
            logger.warning(
                "Attempted to unregister service %s which is not registered", name
            )
            return
        del self._services[name]

    def __contains__(self, name: object) -> bool:
        return name in self._services

    @property
    def names(self) -> list[str]:
        return list(self._services)

    @property
    def cli(self) -> CLIService:
        return self.get("CLIService")

    @property
    def docker(self) -> DockerService:
        return self.get("DockerService")

    @property
    def connection(self) -> ConnectionService:
        return self.get("ConnectionService")

    @property
    def client(self) -> ClientService:
        return self.get("ClientService")

    @property
    def accounts(self) -> AccountService:
        return self.get("AccountService")

    @property
    def output(self) -> NodeOutput:
        return self.get(OUTPUT_SERVICE)
