"""Application configuration."""

from app.config.settings import Settings, settings

__all__ = ["Settings", "settings"]
