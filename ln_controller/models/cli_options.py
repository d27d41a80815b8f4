"""Resolved command-line options shared read-only by every state."""

from __future__ import annotations

import logging
from enum import Enum, IntEnum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from ln_common.logging import TRACE
from ln_controller.utils.filesystem import platform_app_data_path

APP_DATA_NAME = "hedera-local"


class NetworkType(str, Enum):
    """Pre-built network configurations."""

    LOCAL = "local"
    MAINNET = "mainnet"
    TESTNET = "testnet"
    PREVIEWNET = "previewnet"


class VerboseLevel(IntEnum):
    """Verbosity selected on the command line, ordered from quiet to chatty."""

    SILENT = 0
    ERROR = 1
    WARNING = 2
    INFO = 3
    DEBUG = 4
    TRACE = 5

    def to_logging_level(self) -> int:
        return _LOGGING_LEVELS[self]


_LOGGING_LEVELS = {
    VerboseLevel.SILENT: logging.CRITICAL + 10,
    VerboseLevel.ERROR: logging.ERROR,
    VerboseLevel.WARNING: logging.WARNING,
    VerboseLevel.INFO: logging.INFO,
    VerboseLevel.DEBUG: logging.DEBUG,
    VerboseLevel.TRACE: TRACE,
}


class CLIOptions(BaseModel):
    """Immutable snapshot of the options for one invocation."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    accounts: int = Field(default=10, ge=0, description="Generated accounts of each type")
    async_mode: bool = Field(default=False, description="Create accounts concurrently")
    balance: float = Field(default=10000, ge=0, description="Starting balance in HBAR")
    detached: bool = False
    host: str = "127.0.0.1"
    network: NetworkType = NetworkType.LOCAL
    limits: bool = False
    dev_mode: bool = False
    full_mode: bool = False
    multi_node: bool = False
    user_compose: bool = True
    user_compose_dir: str = "./overrides/"
    blocklisting: bool = False
    startup: bool = True
    verbose: VerboseLevel = VerboseLevel.INFO
    timestamp: str = ""
    enable_debug: bool = False
    create_initial_resources: bool = False
    work_dir: Path = Field(default_factory=lambda: platform_app_data_path(APP_DATA_NAME))
    connection_attempts: int = Field(default=100, ge=1)
    connection_interval: float = Field(default=0.1, gt=0)

    @property
    def mode_label(self) -> str:
        return "asynchronous" if self.async_mode else "synchronous"
