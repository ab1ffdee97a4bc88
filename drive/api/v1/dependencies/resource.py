"""Resource dependencies: content store, dispatcher, URL builder, and use cases (composition root)."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from drive.application.interfaces.services import INotificationDispatcher
from drive.application.interfaces.storage import IContentStore
from drive.application.services.digest_service import DigestService
from drive.application.services.resource_urls import ResourceUrlBuilder
from drive.application.use_cases.resources import (
    ResourceDeletionService,
    ResourceQueryService,
    ResourceUploadService,
)
from drive.core.config import get_settings
from drive.core.constants import API_V1_PREFIX
from drive.infrastructure.persistence.database import get_db
from drive.infrastructure.persistence.repositories import (
    BucketRepository,
    ResourceRepository,
)
from drive.infrastructure.persistence.unit_of_work import SqlAlchemyUnitOfWork


def get_content_store(request: Request) -> IContentStore:
    """Process-wide content store created in lifespan."""
    return request.app.state.content_store


def get_dispatcher(request: Request) -> INotificationDispatcher:
    """Process-wide webhook dispatcher created in lifespan."""
    return request.app.state.dispatcher


def get_url_builder() -> ResourceUrlBuilder:
    return ResourceUrlBuilder(get_settings().public_base_url, API_V1_PREFIX)


def get_webhook_extra_headers(request: Request) -> dict[str, str]:
    """Collect {prefix}{Name} request headers as {Name: value} for webhook forwarding."""
    prefix = get_settings().webhook_header_prefix.lower()
    extra: dict[str, str] = {}
    for name, value in request.headers.items():
        if prefix and name.lower().startswith(prefix) and len(name) > len(prefix):
            extra[name[len(prefix):]] = value
    return extra


async def get_resource_upload_service(
    db: Annotated[AsyncSession, Depends(get_db)],
    storage: Annotated[IContentStore, Depends(get_content_store)],
    dispatcher: Annotated[INotificationDispatcher, Depends(get_dispatcher)],
    urls: Annotated[ResourceUrlBuilder, Depends(get_url_builder)],
) -> ResourceUploadService:
    """Build ResourceUploadService; it commits through its unit of work before dispatching."""
    return ResourceUploadService(
        storage=storage,
        resource_repo=ResourceRepository(db),
        bucket_repo=BucketRepository(db),
        uow=SqlAlchemyUnitOfWork(db),
        digest_service=DigestService(),
        dispatcher=dispatcher,
        urls=urls,
        max_upload_size=get_settings().max_upload_size,
    )


async def get_resource_query_service(
    db: Annotated[AsyncSession, Depends(get_db)],
    storage: Annotated[IContentStore, Depends(get_content_store)],
    urls: Annotated[ResourceUrlBuilder, Depends(get_url_builder)],
) -> ResourceQueryService:
    """Build ResourceQueryService for metadata, listing, and downloads."""
    return ResourceQueryService(
        storage=storage,
        resource_repo=ResourceRepository(db),
        bucket_repo=BucketRepository(db),
        urls=urls,
    )


async def get_resource_deletion_service(
    db: Annotated[AsyncSession, Depends(get_db)],
    storage: Annotated[IContentStore, Depends(get_content_store)],
    dispatcher: Annotated[INotificationDispatcher, Depends(get_dispatcher)],
    urls: Annotated[ResourceUrlBuilder, Depends(get_url_builder)],
) -> ResourceDeletionService:
    """Build ResourceDeletionService; the row delete commits before dispatch and blob removal."""
    return ResourceDeletionService(
        storage=storage,
        resource_repo=ResourceRepository(db),
        bucket_repo=BucketRepository(db),
        uow=SqlAlchemyUnitOfWork(db),
        dispatcher=dispatcher,
        urls=urls,
    )
