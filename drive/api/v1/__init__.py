"""API v1: authenticated resource and webhook routes."""

from drive.api.v1.router import api_router

__all__ = ["api_router"]
