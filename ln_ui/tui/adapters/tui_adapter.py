from typing import Sequence

from ln_controller.ui_interfaces import NodeOutput
from ln_ui.tui.system.models import LogLine, TableModel
from ln_ui.tui.system.protocols import UI


class TUIAdapter(NodeOutput):
    """Adapts the UI facade to the controller-level NodeOutput protocol."""

    def __init__(self, tui: UI):
        self.tui = tui

    def show_info(self, message: str) -> None:
        self.tui.present.info(message)

    def show_warning(self, message: str) -> None:
        self.tui.present.warning(message)

    def show_error(self, message: str) -> None:
        self.tui.present.error(message)

    def show_success(self, message: str) -> None:
        self.tui.present.success(message)

    def show_table(self, title: str, columns: Sequence[str], rows: list[Sequence[str]]) -> None:
        model = TableModel(title=title, columns=list(columns), rows=[[str(c) for c in r] for r in rows])
        self.tui.tables.show(model)

    def attach_log(self, line: str, source: str) -> None:
        self.tui.logs.add(LogLine(source=source, text=line))
