from __future__ import annotations

RICH_ACCENT = "blue"
RICH_ACCENT_BOLD = f"bold {RICH_ACCENT}"
RICH_BORDER_STYLE = RICH_ACCENT

PRESENTER_TEMPLATES: dict[str, str] = {
    "info": "[blue]ℹ[/blue] {message}",
    "warning": "[yellow]⚠ {message}[/yellow]",
    "error": "[red]✖ {message}[/red]",
    "success": "[green]✔ {message}[/green]",
}

# Container log prefixes, keyed by container label.
LOG_SOURCE_STYLES: dict[str, str] = {
    "network-node": "magenta",
    "mirror-node-rest": "cyan",
    "json-rpc-relay": "green",
}
DEFAULT_LOG_SOURCE_STYLE = "dim"
