"""Shared helpers for the local node orchestrator."""

from ln_common.api import LocalNodeError, configure_logging

__all__ = ["configure_logging", "LocalNodeError"]
