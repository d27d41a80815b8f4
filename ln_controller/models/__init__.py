"""Data models consumed by states and services."""

from ln_controller.models.accounts import (
    AccountProps,
    AccountRecord,
    AccountType,
    InitialResources,
    KeyType,
    PrivateKeySpec,
    TokenProps,
)
from ln_controller.models.cli_options import CLIOptions, NetworkType, VerboseLevel
from ln_controller.models.network_config import (
    ConfigEntry,
    NetworkConfiguration,
    OriginalNodeConfiguration,
    load_initial_resources,
    load_network_configuration,
    load_original_node_configuration,
)

__all__ = [
    "AccountProps",
    "AccountRecord",
    "AccountType",
    "CLIOptions",
    "ConfigEntry",
    "InitialResources",
    "KeyType",
    "NetworkConfiguration",
    "NetworkType",
    "OriginalNodeConfiguration",
    "PrivateKeySpec",
    "TokenProps",
    "VerboseLevel",
    "load_initial_resources",
    "load_network_configuration",
    "load_original_node_configuration",
]
