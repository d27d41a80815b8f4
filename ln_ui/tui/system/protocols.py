from typing import Protocol

from ln_ui.tui.system.models import LogLine, TableModel


class TablePresenter(Protocol):
    def show(self, table: TableModel) -> None: ...


class LogPresenter(Protocol):
    def add(self, line: LogLine) -> None: ...


class PresenterSink(Protocol):
    def emit(self, level: str, message: str) -> None: ...
    def emit_panel(self, message: str, title: str | None, border_style: str | None) -> None: ...
    def emit_rule(self, title: str) -> None: ...


class Presenter:
    def __init__(self, sink: PresenterSink) -> None:
        self._sink = sink

    def info(self, message: str) -> None:
        self._sink.emit("info", message)

    def warning(self, message: str) -> None:
        self._sink.emit("warning", message)

    def error(self, message: str) -> None:
        self._sink.emit("error", message)

    def success(self, message: str) -> None:
        self._sink.emit("success", message)

    def panel(self, message: str, title: str | None = None, border_style: str | None = None) -> None:
        self._sink.emit_panel(message, title, border_style)

    def rule(self, title: str) -> None:
        self._sink.emit_rule(title)


class UI(Protocol):
    tables: TablePresenter
    present: Presenter
    logs: LogPresenter
