"""Configuration for source-store."""

from source_store.config.settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
