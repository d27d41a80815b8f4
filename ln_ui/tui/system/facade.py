from typing import Sequence

from rich.console import Console

from ln_ui.tui.system.components.logs import RichLogPresenter
from ln_ui.tui.system.components.presenter import RichPresenter
from ln_ui.tui.system.components.table import RichTablePresenter
from ln_ui.tui.system.models import TableModel
from ln_ui.tui.system.protocols import LogPresenter, Presenter, TablePresenter, UI


class TUI(UI):
    def __init__(self, console: Console | None = None):
        self._console = console or Console()
        self.tables: TablePresenter = RichTablePresenter(self._console)
        self.present: Presenter = RichPresenter(self._console)
        self.logs: LogPresenter = RichLogPresenter(self._console)

    def show_table(self, title: str, columns: Sequence[str], rows: list[Sequence[str]]) -> None:
        model = TableModel(title=title, columns=list(columns), rows=[list(r) for r in rows])
        self.tables.show(model)
