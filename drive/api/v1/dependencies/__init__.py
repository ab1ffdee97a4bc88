"""Presentation-layer dependency injection (composition root).

Provides FastAPI Depends() for DB sessions and application use cases.
All use cases are built from infrastructure implementations here;
routes depend only on these dependencies, not on infra directly.
"""

from drive.api.v1.dependencies.auth import get_client_id
from drive.api.v1.dependencies.resource import (
    get_content_store,
    get_dispatcher,
    get_resource_deletion_service,
    get_resource_query_service,
    get_resource_upload_service,
    get_url_builder,
    get_webhook_extra_headers,
)
from drive.api.v1.dependencies.webhook import (
    get_webhook_service,
    get_webhook_service_for_write,
)

__all__ = [
    "get_client_id",
    "get_content_store",
    "get_dispatcher",
    "get_resource_deletion_service",
    "get_resource_query_service",
    "get_resource_upload_service",
    "get_url_builder",
    "get_webhook_extra_headers",
    "get_webhook_service",
    "get_webhook_service_for_write",
]
