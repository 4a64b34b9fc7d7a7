"""HTTP API for the source table."""

from source_store.api.app import create_app

__all__ = ["create_app"]
