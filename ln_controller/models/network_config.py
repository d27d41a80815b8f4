"""Network configuration and the original node configuration snapshot."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from ln_common.errors import ConfigurationError
from ln_controller.models.accounts import InitialResources
from ln_controller.models.cli_options import NetworkType

RESOURCES_DIR = Path(__file__).resolve().parent.parent / "resources"
NETWORKS_DIR = RESOURCES_DIR / "networks"
ORIGINAL_NODE_CONFIGURATION_PATH = RESOURCES_DIR / "original_node_configuration.yaml"
INITIAL_RESOURCES_PATH = RESOURCES_DIR / "initial_resources.yaml"


class ConfigEntry(BaseModel):
    """Single key/value pair for env variables or node properties."""

    key: str = Field(min_length=1)
    value: Any

    def as_env_value(self) -> str:
        if isinstance(self.value, bool):
            return "true" if self.value else "false"
        return str(self.value)


class NetworkConfiguration(BaseModel):
    """Image tags, relay environment and node properties for one network."""

    image_tags: list[ConfigEntry] = Field(default_factory=list)
    env: list[ConfigEntry] = Field(default_factory=list)
    node_properties: list[ConfigEntry] = Field(default_factory=list)

    model_config = {"extra": "ignore"}

    def with_env(self, extra: list[ConfigEntry]) -> "NetworkConfiguration":
        return self.model_copy(update={"env": [*self.env, *extra]})


class TurboNodeProperties(BaseModel):
    data_path: str
    sources: list[dict[str, Any]] = Field(default_factory=list)


class OriginalNodeConfiguration(BaseModel):
    """Pristine values restored by the clean up phase."""

    bootstrap_properties: list[ConfigEntry]
    turbo_node_properties: TurboNodeProperties
    local: dict[str, Any] = Field(default_factory=dict)
    full_node_properties: list[dict[str, Any]] = Field(default_factory=list)

    model_config = {"extra": "ignore"}

    def render_bootstrap_properties(
        self, extra: list[ConfigEntry] | None = None
    ) -> str:
        return render_properties([*self.bootstrap_properties, *(extra or [])])


def render_properties(entries: list[ConfigEntry]) -> str:
    """Render entries in java properties format, one `key=value` per line."""
    return "".join(f"{entry.key}={entry.as_env_value()}\n" for entry in entries)


def _load_yaml_mapping(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise ConfigurationError(
            f"Configuration file not found: {path}", context={"path": path}
        )
    data = yaml.safe_load(path.read_text()) or {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            "Configuration file must contain a mapping at the top level.",
            context={"path": path},
        )
    return data


def load_network_configuration(
    network: NetworkType | str, base_dir: Path = NETWORKS_DIR
) -> NetworkConfiguration:
    """Load the configuration for *network*, falling back to `local`."""
    try:
        resolved = NetworkType(network)
    except ValueError:
        resolved = NetworkType.LOCAL
    data = _load_yaml_mapping(base_dir / f"{resolved.value}.yaml")
    return NetworkConfiguration.model_validate(data)


def load_original_node_configuration(
    path: Path = ORIGINAL_NODE_CONFIGURATION_PATH,
) -> OriginalNodeConfiguration:
    return OriginalNodeConfiguration.model_validate(_load_yaml_mapping(path))


def load_initial_resources(path: Path = INITIAL_RESOURCES_PATH) -> InitialResources:
    return InitialResources.model_validate(_load_yaml_mapping(path))
