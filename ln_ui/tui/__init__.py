"""
UI adapter package providing Rich-based and headless renderers.
"""

from ln_ui.tui.system.facade import TUI
from ln_ui.tui.system.headless import HeadlessUI
from ln_ui.tui.system.protocols import LogPresenter, Presenter, TablePresenter, UI

__all__ = [
    "UI",
    "TUI",
    "HeadlessUI",
    "LogPresenter",
    "Presenter",
    "TablePresenter",
]
