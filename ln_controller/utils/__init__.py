"""Helpers shared by states and services."""

from ln_controller.utils.debounce import debounce
from ln_controller.utils.retry import retry_task

__all__ = ["debounce", "retry_task"]
