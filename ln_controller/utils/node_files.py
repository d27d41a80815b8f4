"""Read and write the node configuration files kept in the work directory."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from ln_common.errors import ConfigurationError
from ln_common.logging import TRACE
from ln_controller.constants import BOOTSTRAP_PROPERTIES_PATH, MIRROR_APPLICATION_PATH
from ln_controller.models.network_config import ConfigEntry, OriginalNodeConfiguration

logger = logging.getLogger(__name__)


def bootstrap_properties_path(work_dir: Path) -> Path:
    return work_dir.joinpath(*BOOTSTRAP_PROPERTIES_PATH)


def mirror_application_path(work_dir: Path) -> Path:
    return work_dir.joinpath(*MIRROR_APPLICATION_PATH)


def write_bootstrap_properties(
    path: Path,
    original: OriginalNodeConfiguration,
    extra: list[ConfigEntry] | None = None,
) -> None:
    for entry in extra or []:
        logger.log(TRACE, "Bootstrap property %s will be set to %s.", entry.key, entry.value)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(original.render_bootstrap_properties(extra), encoding="utf-8")


def load_mirror_application(path: Path) -> dict[str, Any]:
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            "Mirror node application file must contain a mapping.", context={"path": path}
        )
    return data


def save_mirror_application(path: Path, data: dict[str, Any]) -> None:
    path.write_text(
        yaml.safe_dump(data, sort_keys=False, width=256), encoding="utf-8"
    )


def _section(data: dict[str, Any], *keys: str) -> dict[str, Any]:
    node = data
    for key in keys:
        child = node.get(key)
        if not isinstance(child, dict):
            child = {}
            node[key] = child
        node = child
    return node


def configure_mirror_application(
    data: dict[str, Any],
    original: OriginalNodeConfiguration,
    *,
    turbo_mode: bool,
    debug_mode: bool,
) -> dict[str, Any]:
    """Apply turbo-mode streaming and debug-mode local downloader settings."""
    importer = _section(data, "hedera", "mirror", "importer")
    downloader = _section(importer, "downloader")
    if turbo_mode:
        importer["dataPath"] = original.turbo_node_properties.data_path
        downloader["sources"] = [dict(source) for source in original.turbo_node_properties.sources]
    if debug_mode:
        downloader["local"] = dict(original.local)
    return data


def revert_mirror_application(
    data: dict[str, Any], original: OriginalNodeConfiguration
) -> dict[str, Any]:
    """Drop the run-specific importer settings and restore the monitor nodes."""
    importer = _section(data, "hedera", "mirror", "importer")
    downloader = _section(importer, "downloader")
    importer.pop("dataPath", None)
    downloader.pop("sources", None)
    downloader.pop("local", None)
    monitor = _section(data, "hedera", "mirror", "monitor")
    monitor["nodes"] = [dict(node) for node in original.full_node_properties]
    return data
