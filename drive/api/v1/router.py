"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags. All routes
use dependencies from drive.api.v1.dependencies (no manual repo/service construction).
"""

from fastapi import APIRouter

from drive.api.v1.endpoints import health, resources, webhooks

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(resources.router, prefix="/resources", tags=["resources"])
api_router.include_router(webhooks.router, prefix="/buckets", tags=["webhooks"])
