from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.rule import Rule

from ln_ui.tui.core.theme import PRESENTER_TEMPLATES
from ln_ui.tui.system.protocols import Presenter, PresenterSink


class _RichPresenterSink(PresenterSink):
    def __init__(self, console: Console) -> None:
        self._console = console

    def emit(self, level: str, message: str) -> None:
        template = PRESENTER_TEMPLATES.get(level, "{message}")
        self._console.print(template.format(message=escape(message)))

    def emit_panel(
        self,
        message: str,
        title: str | None,
        border_style: str | None,
    ) -> None:
        self._console.print(Panel(message, title=title, border_style=border_style))

    def emit_rule(self, title: str) -> None:
        self._console.print(Rule(title))


class RichPresenter(Presenter):
    def __init__(self, console: Console) -> None:
        super().__init__(_RichPresenterSink(console))
