"""Core: config, lifespan, exception handlers, and rate limiting."""

from drive.core.config import Settings, get_settings

__all__ = ["Settings", "get_settings"]
