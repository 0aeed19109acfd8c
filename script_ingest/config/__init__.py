"""Configuration for the script ingestion pipeline."""

from .settings import Settings, settings

__all__ = ["Settings", "settings"]
