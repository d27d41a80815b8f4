"""Shared error taxonomy for the local node orchestrator."""

from __future__ import annotations

from typing import Any, Mapping, TypeVar


def _normalize_context_value(value: Any) -> Any:
    if isinstance(value, Mapping):
        return normalize_context(value)
    if isinstance(value, (list, tuple)):
        return [_normalize_context_value(item) for item in value]
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    return str(value)


def normalize_context(context: Mapping[str, Any]) -> dict[str, Any]:
    """Return a JSON-friendly copy of an error context mapping."""
    return {key: _normalize_context_value(val) for key, val in context.items()}


class LocalNodeError(Exception):
    """Base error type for typed failure handling."""

    def __init__(
        self,
        message: str,
        *,
        context: Mapping[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.context = normalize_context(context or {})
        if cause is not None:
            self.__cause__ = cause

    @property
    def error_type(self) -> str:
        return self.__class__.__name__

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.error_type, "message": str(self), "context": self.context}


class ConfigurationError(LocalNodeError):
    """Failure due to invalid or missing configuration."""


class ServiceRegistryError(LocalNodeError):
    """Service registered twice or looked up without being registered."""


class StateError(LocalNodeError):
    """A state was driven outside of its contract."""


class DockerServiceError(LocalNodeError):
    """Docker daemon, compose, or container failure."""


class NodeConnectionError(LocalNodeError):
    """A service port never accepted connections."""

    def __init__(
        self,
        port: int | None = None,
        *,
        context: Mapping[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        target = f"to port {port}" if port is not None else "to local node"
        merged = {"port": port, **(context or {})}
        super().__init__(
            f"Something went wrong, while trying to connect {target}",
            context=merged,
            cause=cause,
        )
        self.port = port


class ClientError(LocalNodeError):
    """The ledger client could not be created or used."""

    def __init__(self, detail: str | None = None, *, cause: Exception | None = None) -> None:
        suffix = f": {detail}" if detail else ""
        super().__init__(
            f"Something went wrong, while trying to create SDK Client{suffix}",
            cause=cause,
        )


class InvalidTimestampError(LocalNodeError):
    """Debug timestamp does not match the accepted formats."""

    def __init__(self, timestamp: str) -> None:
        super().__init__(
            "Invalid timestamp string. Accepted formats are: "
            "0000000000.000000000 and 0000000000-000000000",
            context={"timestamp": timestamp},
        )


class RecordFileNotFoundError(LocalNodeError):
    """No record stream file exists at or after the requested timestamp."""

    def __init__(self, timestamp: str, directory: Any = None) -> None:
        super().__init__(
            "No record file was found for the provided timestamp, check if the "
            "timestamp is correct and local node was started with --enable-debug",
            context={"timestamp": timestamp, "directory": directory},
        )


class DebugModeError(LocalNodeError):
    """Debug command used against a node started without debug support."""

    def __init__(self) -> None:
        super().__init__(
            "Debug mode is not enabled to use this command. "
            "Please use the --enable-debug flag to enable it."
        )


class TokenValidationError(LocalNodeError):
    """Token properties are inconsistent."""


T = TypeVar("T", bound=LocalNodeError)


def wrap_error(
    error_cls: type[T],
    message: str,
    *,
    context: Mapping[str, Any] | None = None,
    cause: Exception | None = None,
) -> T:
    """Create a typed LocalNodeError with optional context and cause."""
    return error_cls(message, context=context, cause=cause)


def error_to_payload(error: LocalNodeError) -> dict[str, Any]:
    """Convert a LocalNodeError to a flat payload for structured logs."""
    return {
        "error_type": error.error_type,
        "error": str(error),
        "error_context": error.context,
    }
