from rich.console import Console
from rich.markup import escape

from ln_ui.tui.core import theme
from ln_ui.tui.system.models import LogLine
from ln_ui.tui.system.protocols import LogPresenter


def format_log_line(line: LogLine) -> str:
    style = theme.LOG_SOURCE_STYLES.get(line.source, theme.DEFAULT_LOG_SOURCE_STYLE)
    return f"[{style}]{escape(line.source)}[/{style}] | {escape(line.text.rstrip())}"


class RichLogPresenter(LogPresenter):
    """Prints container log lines prefixed with their source.

    Lines arrive from the log follower threads; Console serialises writes.
    """

    def __init__(self, console: Console) -> None:
        self._console = console

    def add(self, line: LogLine) -> None:
        if not line.text.strip():
            return
        self._console.print(format_log_line(line), highlight=False)
