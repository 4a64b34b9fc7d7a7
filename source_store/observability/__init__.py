"""Observability layer - structured logging."""

from source_store.observability.logging import (
    bind_context,
    clear_context,
    setup_logging,
)

__all__ = ["setup_logging", "bind_context", "clear_context"]
