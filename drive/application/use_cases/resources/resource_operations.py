"""Resource operations: upload pipeline, queries, and deletion with single responsibilities."""

from __future__ import annotations

from collections.abc import AsyncIterable, Mapping

from drive.application.dtos.bucket import BucketResult
from drive.application.dtos.notification import NotificationEvent
from drive.application.dtos.resource import (
    ResourceContent,
    ResourceCreate,
    ResourceResult,
    ResourceUploadResult,
    ResourceView,
)
from drive.application.interfaces.repositories import (
    IBucketRepository,
    IResourceRepository,
    IUnitOfWork,
)
from drive.application.interfaces.services import (
    IDigestService,
    INotificationDispatcher,
)
from drive.application.interfaces.storage import IContentStore
from drive.application.services.extension_resolver import (
    media_type,
    resolve_multipart_extension,
    resolve_stream_extension,
)
from drive.application.services.resource_urls import ResourceUrlBuilder
from drive.domain.enums import WebhookEventType
from drive.domain.exceptions import (
    DriveException,
    ResourceAlreadyExistsException,
    ResourceNotFoundException,
)
from drive.domain.value_objects import ContentDigest, build_filename
from drive.shared.telemetry.logging import get_logger
from drive.shared.utils.datetime import utc_now

logger = get_logger(__name__)


async def get_owned_bucket(
    bucket_repo: IBucketRepository, bucket_id: str, client_id: str
) -> BucketResult:
    """Return the bucket if client_id owns it.

    Raises:
        ResourceNotFoundException: Bucket missing or owned by another client.
    """
    bucket = await bucket_repo.get_by_id(bucket_id)
    if bucket is None or bucket.client_id != client_id:
        raise ResourceNotFoundException("bucket", bucket_id)
    return bucket


def digest_from_name(name: str) -> str:
    """Digest part of "{digest}" or "{digest}{ext}".

    Raises:
        ResourceNotFoundException: name cannot be a stored digest.
    """
    try:
        return ContentDigest(name.split(".", 1)[0]).value
    except ValueError as e:
        raise ResourceNotFoundException("resource", name) from e


def build_view(
    urls: ResourceUrlBuilder, bucket: BucketResult, resource: ResourceResult
) -> ResourceView:
    """Attach canonical and (public buckets only) public URLs."""
    return ResourceView(
        resource=resource,
        url=urls.resource_url(bucket.id, resource.filename),
        public_url=(
            urls.public_url(bucket.id, resource.filename) if bucket.is_public else None
        ),
    )


async def remove_blob_quietly(
    storage: IContentStore, bucket_id: str, filename: str, reason: str
) -> None:
    """Best-effort blob removal; failures are logged, never raised."""
    try:
        await storage.remove(bucket_id, filename)
    except DriveException as e:
        logger.error(
            "Failed to remove blob %s/%s (%s): %s", bucket_id, filename, reason, e.message
        )


class ResourceUploadService:
    """Single responsibility: ingest bytes as a content-addressed resource.

    Pipeline: stream to scratch while hashing, then under one write
    transaction dedup on (bucket, digest), place the blob, insert metadata
    and commit. resource.new is dispatched only after the commit.
    """

    def __init__(
        self,
        storage: IContentStore,
        resource_repo: IResourceRepository,
        bucket_repo: IBucketRepository,
        uow: IUnitOfWork,
        digest_service: IDigestService,
        dispatcher: INotificationDispatcher,
        urls: ResourceUrlBuilder,
        max_upload_size: int | None = None,
    ) -> None:
        self.storage = storage
        self.resource_repo = resource_repo
        self.bucket_repo = bucket_repo
        self.uow = uow
        self.digest_service = digest_service
        self.dispatcher = dispatcher
        self.urls = urls
        self.max_upload_size = max_upload_size or None

    async def upload_stream(
        self,
        bucket_id: str,
        client_id: str,
        chunks: AsyncIterable[bytes],
        content_type: str | None,
        extension: str | None = None,
        extra_headers: Mapping[str, str] | None = None,
    ) -> ResourceUploadResult:
        """Upload a raw body. Extension: explicit, else derived from content_type.

        Raises:
            ResourceNotFoundException: Bucket missing or not owned.
            ValidationException: No extension can be determined.
            PayloadTooLargeException: Body exceeds max_upload_size.
        """
        bucket = await get_owned_bucket(self.bucket_repo, bucket_id, client_id)
        ext = resolve_stream_extension(extension, content_type)
        return await self._ingest(bucket, chunks, media_type(content_type), ext, extra_headers)

    async def upload_file(
        self,
        bucket_id: str,
        client_id: str,
        chunks: AsyncIterable[bytes],
        filename: str | None,
        content_type: str | None,
        extension: str | None = None,
        extra_headers: Mapping[str, str] | None = None,
    ) -> ResourceUploadResult:
        """Upload a multipart file part. Extension: explicit, else from filename (may be empty)."""
        bucket = await get_owned_bucket(self.bucket_repo, bucket_id, client_id)
        ext = resolve_multipart_extension(extension, filename)
        return await self._ingest(bucket, chunks, media_type(content_type), ext, extra_headers)

    async def _ingest(
        self,
        bucket: BucketResult,
        chunks: AsyncIterable[bytes],
        content_type: str,
        ext: str,
        extra_headers: Mapping[str, str] | None,
    ) -> ResourceUploadResult:
        async with self.storage.scratch_file() as scratch:
            digest, size = await self.digest_service.digest_to_file(
                chunks, scratch, self.max_upload_size
            )
            # Concurrent uploads of the same content queue here; the later one
            # sees the committed row and takes the dedup path.
            await self.uow.begin()
            existing = await self.resource_repo.get_by_bucket_and_hash(bucket.id, digest)
            if existing is not None:
                await self.uow.rollback()
                logger.info("Dedup hit: bucket=%s hash=%s", bucket.id, digest)
                return self._result(bucket, existing, created=False)
            filename = build_filename(digest, ext)
            await self.storage.write(bucket.id, filename, scratch)

        try:
            resource = await self.resource_repo.create_resource(
                ResourceCreate(
                    bucket_id=bucket.id,
                    hash=digest,
                    size=size,
                    content_type=content_type,
                    extension=ext,
                )
            )
            await self.uow.commit()
        except ResourceAlreadyExistsException:
            winner = await self.resource_repo.get_by_bucket_and_hash(bucket.id, digest)
            await self.uow.rollback()
            if winner is None:
                await self._discard_unreferenced(bucket.id, digest, filename)
                raise
            logger.info("Dedup race lost: bucket=%s hash=%s", bucket.id, digest)
            if winner.filename != filename:
                await remove_blob_quietly(self.storage, bucket.id, filename, "dedup race")
            return self._result(bucket, winner, created=False)
        except Exception:
            await self._discard_unreferenced(bucket.id, digest, filename)
            raise

        logger.info(
            "Resource created: id=%s bucket=%s hash=%s size=%d",
            resource.id,
            bucket.id,
            digest,
            size,
        )
        self.dispatcher.dispatch(
            NotificationEvent(
                event_type=WebhookEventType.RESOURCE_NEW.value,
                occurred_at=utc_now(),
                bucket=bucket,
                resource=resource,
                resource_url=self.urls.resource_url(bucket.id, resource.filename),
            ),
            extra_headers,
        )
        return self._result(bucket, resource, created=True)

    async def _discard_unreferenced(self, bucket_id: str, digest: str, filename: str) -> None:
        """Remove a placed blob after a failed insert or commit.

        The blob stays when a committed row already points at the same file
        name, or when that cannot be checked.
        """
        try:
            await self.uow.rollback()
            holder = await self.resource_repo.get_by_bucket_and_hash(bucket_id, digest)
            await self.uow.rollback()
        except Exception:
            logger.warning(
                "Keeping blob %s/%s: could not check for a committed row",
                bucket_id,
                filename,
                exc_info=True,
            )
            return
        if holder is not None and holder.filename == filename:
            logger.info("Keeping blob %s/%s: referenced by resource %s", bucket_id, filename, holder.id)
            return
        await remove_blob_quietly(self.storage, bucket_id, filename, "metadata insert failed")

    def _result(
        self, bucket: BucketResult, resource: ResourceResult, *, created: bool
    ) -> ResourceUploadResult:
        view = build_view(self.urls, bucket, resource)
        return ResourceUploadResult(
            resource=resource,
            created=created,
            url=view.url,
            public_url=view.public_url,
        )


class ResourceQueryService:
    """Single responsibility: resource metadata, listing, and content streams."""

    def __init__(
        self,
        storage: IContentStore,
        resource_repo: IResourceRepository,
        bucket_repo: IBucketRepository,
        urls: ResourceUrlBuilder,
    ) -> None:
        self.storage = storage
        self.resource_repo = resource_repo
        self.bucket_repo = bucket_repo
        self.urls = urls

    async def _find(self, bucket: BucketResult, name: str) -> ResourceResult:
        resource = await self.resource_repo.get_by_bucket_and_hash(
            bucket.id, digest_from_name(name)
        )
        if resource is None:
            raise ResourceNotFoundException("resource", name)
        return resource

    async def get_resource(self, bucket_id: str, client_id: str, name: str) -> ResourceView:
        """Metadata of one resource; name is the digest with or without extension."""
        bucket = await get_owned_bucket(self.bucket_repo, bucket_id, client_id)
        return build_view(self.urls, bucket, await self._find(bucket, name))

    async def list_resources(
        self, bucket_id: str, client_id: str, skip: int = 0, limit: int = 100
    ) -> list[ResourceView]:
        """Resources in the bucket, newest first."""
        bucket = await get_owned_bucket(self.bucket_repo, bucket_id, client_id)
        resources = await self.resource_repo.list_by_bucket(bucket.id, skip=skip, limit=limit)
        return [build_view(self.urls, bucket, r) for r in resources]

    async def open_resource(
        self, bucket_id: str, client_id: str, name: str
    ) -> ResourceContent:
        """Resource with its content stream (authenticated download)."""
        bucket = await get_owned_bucket(self.bucket_repo, bucket_id, client_id)
        resource = await self._find(bucket, name)
        chunks = await self.storage.open(bucket.id, resource.filename)
        return ResourceContent(resource=resource, chunks=chunks)

    async def open_public_resource(self, bucket_id: str, name: str) -> ResourceContent:
        """Anonymous download; only resources of public buckets are served."""
        bucket = await self.bucket_repo.get_by_id(bucket_id)
        if bucket is None or not bucket.is_public:
            raise ResourceNotFoundException("bucket", bucket_id)
        resource = await self._find(bucket, name)
        chunks = await self.storage.open(bucket.id, resource.filename)
        return ResourceContent(resource=resource, chunks=chunks)


class ResourceDeletionService:
    """Single responsibility: delete a resource row and its blob, announcing resource.deleted."""

    def __init__(
        self,
        storage: IContentStore,
        resource_repo: IResourceRepository,
        bucket_repo: IBucketRepository,
        uow: IUnitOfWork,
        dispatcher: INotificationDispatcher,
        urls: ResourceUrlBuilder,
    ) -> None:
        self.storage = storage
        self.resource_repo = resource_repo
        self.bucket_repo = bucket_repo
        self.uow = uow
        self.dispatcher = dispatcher
        self.urls = urls

    async def delete_resource(
        self,
        bucket_id: str,
        client_id: str,
        name: str,
        extra_headers: Mapping[str, str] | None = None,
    ) -> ResourceResult:
        """Delete by digest. Returns the snapshot taken before deletion.

        The row delete commits first; then resource.deleted is dispatched with
        the snapshot and the blob is removed (best-effort). A failed commit
        leaves row and blob in place and announces nothing.

        Raises:
            ResourceNotFoundException: Bucket missing/not owned, or no such resource.
        """
        await self.uow.begin()
        bucket = await get_owned_bucket(self.bucket_repo, bucket_id, client_id)
        resource = await self.resource_repo.get_by_bucket_and_hash(
            bucket.id, digest_from_name(name)
        )
        if resource is None:
            raise ResourceNotFoundException("resource", name)

        await self.resource_repo.delete_by_bucket_and_hash(bucket.id, resource.hash)
        await self.uow.commit()

        self.dispatcher.dispatch(
            NotificationEvent(
                event_type=WebhookEventType.RESOURCE_DELETED.value,
                occurred_at=utc_now(),
                bucket=bucket,
                resource=resource,
                resource_url=self.urls.resource_url(bucket.id, resource.filename),
            ),
            extra_headers,
        )
        await remove_blob_quietly(self.storage, bucket.id, resource.filename, "resource deleted")
        logger.info(
            "Resource deleted: id=%s bucket=%s hash=%s", resource.id, bucket.id, resource.hash
        )
        return resource
