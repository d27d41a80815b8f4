"""Controller-level output contracts and no-op implementation."""

from __future__ import annotations

from typing import Protocol, Sequence


class NodeOutput(Protocol):
    """Minimal interface for presentation concerns raised by states."""

    def show_info(self, message: str) -> None:
        """Render an informational message."""

    def show_warning(self, message: str) -> None:
        """Render a warning message."""

    def show_error(self, message: str) -> None:
        """Render an error message."""

    def show_success(self, message: str) -> None:
        """Render a success message."""

    def show_table(self, title: str, columns: Sequence[str], rows: list[Sequence[str]]) -> None:
        """Render a simple table."""

    def attach_log(self, line: str, source: str) -> None:
        """Forward a container log line tagged with its source container."""


class NoOpNodeOutput(NodeOutput):
    """Output sink that drops everything."""

    def show_info(self, message: str) -> None:  # pragma: no cover - trivial
        pass

    def show_warning(self, message: str) -> None:  # pragma: no cover - trivial
        pass

    def show_error(self, message: str) -> None:  # pragma: no cover - trivial
        pass

    def show_success(self, message: str) -> None:  # pragma: no cover - trivial
        pass

    def show_table(self, title: str, columns: Sequence[str], rows: list[Sequence[str]]) -> None:  # pragma: no cover - trivial
        pass

    def attach_log(self, line: str, source: str) -> None:  # pragma: no cover - trivial
        pass
