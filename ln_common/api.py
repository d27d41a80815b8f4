"""Public API surface for ln_common."""

from ln_common.config.env import parse_bool_env, parse_float_env, parse_int_env
from ln_common.errors import (
    ClientError,
    ConfigurationError,
    DebugModeError,
    DockerServiceError,
    InvalidTimestampError,
    LocalNodeError,
    NodeConnectionError,
    RecordFileNotFoundError,
    ServiceRegistryError,
    StateError,
    TokenValidationError,
    error_to_payload,
    wrap_error,
)
from ln_common.logging import TRACE, configure_logging

__all__ = [
    "ClientError",
    "ConfigurationError",
    "DebugModeError",
    "DockerServiceError",
    "InvalidTimestampError",
    "LocalNodeError",
    "NodeConnectionError",
    "RecordFileNotFoundError",
    "ServiceRegistryError",
    "StateError",
    "TRACE",
    "TokenValidationError",
    "configure_logging",
    "error_to_payload",
    "parse_bool_env",
    "parse_float_env",
    "parse_int_env",
    "wrap_error",
]
