"""Prepare the host and the work directory for a fresh network."""

from __future__ import annotations

import os

from ln_common.errors import ConfigurationError
from ln_common.logging import TRACE
from ln_controller.constants import APPLICATION_CONFIG_DIR, NETWORK_LOGS_DIR
from ln_controller.events import EventType
from ln_controller.models.network_config import (
    RESOURCES_DIR,
    ConfigEntry,
    NetworkConfiguration,
    OriginalNodeConfiguration,
    load_network_configuration,
    load_original_node_configuration,
)
from ln_controller.states.base import State, StateKind
from ln_controller.utils.filesystem import copy_directory_contents, ensure_directory_exists
from ln_controller.utils.node_files import (
    bootstrap_properties_path,
    configure_mirror_application,
    load_mirror_application,
    mirror_application_path,
    save_mirror_application,
    write_bootstrap_properties,
)

COMPOSE_RESOURCES_DIR = RESOURCES_DIR / "compose"

RELAY_LIMITS_DISABLED_ENV = (
    ConfigEntry(key="RELAY_HBAR_RATE_LIMIT_TINYBAR", value="0"),
    ConfigEntry(key="RELAY_HBAR_RATE_LIMIT_DURATION", value="0"),
    ConfigEntry(key="RELAY_RATE_LIMIT_DISABLED", value=True),
)


class InitState(State):
    kind = StateKind.INIT

    async def on_start(self) -> None:
        self.logger.info("Initialization of local node...")
        docker = self.services.docker

        if not docker.is_correct_docker_compose_version():
            await self.notify(EventType.UNRESOLVABLE_ERROR)
            return
        if not docker.check_docker():
            self.logger.error("Docker is not running.")
            await self.notify(EventType.UNRESOLVABLE_ERROR)
            return

        report = docker.check_ports()
        if not report.can_start:
            await self.notify(EventType.UNRESOLVABLE_ERROR)
            return
        for port in report.optional_in_use:
            self.services.output.show_warning(f"Port {port} is in use; the related service may not start.")

        self.logger.info(
            "Setting configuration for %s network with latest images on host %s with dev mode turned %s using %s mode...",
            self.options.network.value,
            self.options.host,
            "on" if self.options.dev_mode else "off",
            "full" if self.options.full_mode else "turbo",
        )
        try:
            network_config = load_network_configuration(self.options.network)
            original = load_original_node_configuration()
            self.prepare_work_directory()
            self.configure_env_variables(network_config)
            self.configure_node_properties(original, network_config.node_properties)
            self.configure_mirror_node_properties(original)
        except (ConfigurationError, OSError) as exc:
            self.logger.error("Failed to prepare the local node configuration: %s", exc)
            await self.notify(EventType.UNRESOLVABLE_ERROR)
            return

        await self.notify(EventType.FINISH)

    def prepare_work_directory(self) -> None:
        self.logger.info("Local Node Working directory set to %s", self.work_dir)
        ensure_directory_exists(self.work_dir)
        ensure_directory_exists(self.work_dir / NETWORK_LOGS_DIR / "node")
        copy_directory_contents(COMPOSE_RESOURCES_DIR, self.work_dir)

    def configure_env_variables(self, config: NetworkConfiguration) -> None:
        entries = [
            *config.image_tags,
            *config.env,
            ConfigEntry(
                key="NETWORK_NODE_LOGS_ROOT_PATH",
                value=str(self.work_dir / NETWORK_LOGS_DIR / "node"),
            ),
            ConfigEntry(
                key="APPLICATION_CONFIG_PATH",
                value=str(self.work_dir.joinpath(*APPLICATION_CONFIG_DIR)),
            ),
        ]
        if not self.options.limits:
            entries.extend(RELAY_LIMITS_DISABLED_ENV)
        for entry in entries:
            os.environ[entry.key] = entry.as_env_value()
            self.logger.log(TRACE, "Environment variable %s will be set to %s.", entry.key, entry.as_env_value())
        if not self.options.limits:
            self.logger.info("Hedera JSON-RPC Relay rate limits were disabled.")
        self.logger.info("Needed environment variables were set for this configuration.")

    def configure_node_properties(
        self, original: OriginalNodeConfiguration, node_properties: list[ConfigEntry]
    ) -> None:
        write_bootstrap_properties(bootstrap_properties_path(self.work_dir), original, node_properties)
        self.logger.info("Needed bootstrap properties were set for this configuration.")

    def configure_mirror_node_properties(self, original: OriginalNodeConfiguration) -> None:
        self.logger.log(TRACE, "Configuring required mirror node properties, depending on selected configuration...")
        path = mirror_application_path(self.work_dir)
        application = configure_mirror_application(
            load_mirror_application(path),
            original,
            turbo_mode=not self.options.full_mode,
            debug_mode=self.options.enable_debug,
        )
        save_mirror_application(path, application)
        self.logger.info("Needed mirror node properties were set for this configuration.")
