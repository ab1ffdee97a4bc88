"""Application interfaces (ports): repository, storage and service protocols.

Define contracts for infrastructure implementations (DIP).
No runtime imports from drive.infrastructure or drive.api.
"""

from drive.application.interfaces.repositories import (
    IBucketRepository,
    IResourceRepository,
    IUnitOfWork,
    IWebhookRepository,
)
from drive.application.interfaces.services import (
    IDigestService,
    INotificationDispatcher,
)
from drive.application.interfaces.storage import IContentStore

__all__ = [
    "IBucketRepository",
    "IContentStore",
    "IDigestService",
    "INotificationDispatcher",
    "IResourceRepository",
    "IUnitOfWork",
    "IWebhookRepository",
]
