"""UI facade for the local node CLI.

Keeps the Typer commands and the Rich output apart from the controller
package so either can evolve on its own.
"""

from ln_ui.cli import app
from ln_ui.tui.adapters.tui_adapter import TUIAdapter

__all__ = ["app", "TUIAdapter"]
