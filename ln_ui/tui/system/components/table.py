from __future__ import annotations

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from ln_ui.tui.core import theme
from ln_ui.tui.system.models import TableModel
from ln_ui.tui.system.protocols import TablePresenter


def build_rich_table(
    model: TableModel,
    *,
    show_lines: bool = False,
    border_style: str = theme.RICH_BORDER_STYLE,
    header_style: str = theme.RICH_ACCENT_BOLD,
    title_style: str = theme.RICH_ACCENT_BOLD,
    box_style: box.Box = box.ROUNDED,
) -> Table:
    """Build a Rich Table from a TableModel.

    Key and address columns are never wrapped or truncated so they can be
    copied from the terminal as a whole.
    """
    rich_table = Table(
        title=Text(str(model.title)),
        show_lines=show_lines,
        box=box_style,
        border_style=border_style,
        header_style=header_style,
        title_style=title_style,
    )
    for column in model.columns:
        rich_table.add_column(column, no_wrap=True, overflow="fold")
    for row in model.rows:
        rich_table.add_row(*[str(cell) for cell in row])
    return rich_table


class RichTablePresenter(TablePresenter):
    def __init__(self, console: Console):
        self._console = console

    def show(self, table: TableModel) -> None:
        self._console.print(build_rich_table(table))
