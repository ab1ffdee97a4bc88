"""Application layer: DTOs, interfaces, services, use cases.

Depends only on domain and protocol definitions (DIP).
Infrastructure implements the interfaces (repositories, content store, dispatcher).
"""

from drive.application.interfaces import (
    IBucketRepository,
    IContentStore,
    IDigestService,
    INotificationDispatcher,
    IResourceRepository,
    IWebhookRepository,
)

__all__ = [
    "IBucketRepository",
    "IContentStore",
    "IDigestService",
    "INotificationDispatcher",
    "IResourceRepository",
    "IWebhookRepository",
]
