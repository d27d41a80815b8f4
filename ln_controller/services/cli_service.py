"""Resolve raw command-line values into a CLIOptions snapshot."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Mapping

from ln_common.config.env import env_path, parse_float_env, parse_int_env
from ln_common.logging import TRACE
from ln_controller.models.cli_options import CLIOptions, NetworkType, VerboseLevel

logger = logging.getLogger(__name__)

_STARTUP_COMMANDS = {"start": True, "restart": True}
_NON_STARTUP_COMMANDS = {"stop", "generate-accounts", "debug"}

WORK_DIR_ENV = "LN_WORK_DIR"
CONNECTION_ATTEMPTS_ENV = "LN_CONNECTION_ATTEMPTS"
CONNECTION_INTERVAL_ENV = "LN_CONNECTION_INTERVAL"


def is_startup(command: str) -> bool:
    """Startup commands bring the network up; unknown commands count as startup."""
    if command in _NON_STARTUP_COMMANDS:
        return False
    return _STARTUP_COMMANDS.get(command, True)


def resolve_network(name: str | None) -> NetworkType:
    try:
        return NetworkType((name or "").strip().lower())
    except ValueError:
        return NetworkType.LOCAL


def resolve_verbose_level(level: str | None) -> VerboseLevel:
    if (level or "").strip().lower() == "trace":
        return VerboseLevel.TRACE
    return VerboseLevel.INFO


class CLIService:
    """Holds the options of the current invocation."""

    def __init__(self, options: CLIOptions) -> None:
        self._options = options
        logger.log(TRACE, "CLI Service Initialized!")

    @classmethod
    def from_command(cls, command: str, raw: Mapping[str, Any]) -> "CLIService":
        return cls(cls.resolve_options(command, raw))

    @staticmethod
    def resolve_options(command: str, raw: Mapping[str, Any]) -> CLIOptions:
        """Build the options snapshot for *command* from raw CLI values.

        Non-startup commands always run detached. `network` and `verbose`
        accept their string spellings and fall back to `local` and `info`.
        """
        values = {key: value for key, value in raw.items() if value is not None}
        startup = is_startup(command)
        values["startup"] = startup
        if not startup:
            values["detached"] = True
        if "network" in values and not isinstance(values["network"], NetworkType):
            values["network"] = resolve_network(str(values["network"]))
        if "verbose" in values and not isinstance(values["verbose"], VerboseLevel):
            values["verbose"] = resolve_verbose_level(str(values["verbose"]))
        work_dir = values.get("work_dir") or env_path(WORK_DIR_ENV)
        if work_dir is not None:
            values["work_dir"] = Path(work_dir).expanduser().resolve()
        else:
            values.pop("work_dir", None)
        attempts = parse_int_env(os.environ.get(CONNECTION_ATTEMPTS_ENV))
        if attempts is not None:
            values.setdefault("connection_attempts", attempts)
        interval = parse_float_env(os.environ.get(CONNECTION_INTERVAL_ENV))
        if interval is not None:
            values.setdefault("connection_interval", interval)
        return CLIOptions(**values)

    def current_options(self) -> CLIOptions:
        return self._options

    @property
    def verbose_level(self) -> VerboseLevel:
        return self._options.verbose

    @property
    def record_extension(self) -> str:
        return os.environ.get("STREAM_EXTENSION") or "rcd"
