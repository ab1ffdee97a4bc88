"""Resource repository. Returns application DTOs.

The (bucket_id, hash) unique constraint is the dedup guard: a losing
concurrent insert surfaces as ResourceAlreadyExistsException, never as a
generic database error.
"""

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from drive.application.dtos.resource import ResourceCreate, ResourceResult
from drive.domain.exceptions import DriveException, ResourceAlreadyExistsException
from drive.infrastructure.persistence.models.resource import Resource
from drive.infrastructure.persistence.repositories.base import BaseRepository
from drive.shared.utils.datetime import ensure_utc


def _create_to_resource(d: ResourceCreate) -> Resource:
    """Map ResourceCreate (write-model) to ORM Resource for persistence."""
    return Resource(
        bucket_id=d.bucket_id,
        hash=d.hash,
        size=d.size,
        content_type=d.content_type,
        extension=d.extension,
    )


def _resource_to_result(r: Resource) -> ResourceResult:
    """Map ORM Resource to application ResourceResult."""
    return ResourceResult(
        id=r.id,
        bucket_id=r.bucket_id,
        hash=r.hash,
        size=r.size,
        content_type=r.content_type,
        extension=r.extension,
        created_at=ensure_utc(r.created_at) or r.created_at,
    )


class ResourceRepository(BaseRepository[Resource]):
    """Resource repository (IResourceRepository). create_resource() accepts ResourceCreate; returns ResourceResult."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Resource)

    async def get_by_id(self, resource_id: str) -> ResourceResult | None:
        row = await self.get_model_by_id(resource_id)
        return _resource_to_result(row) if row else None

    async def get_by_bucket_and_hash(
        self, bucket_id: str, content_hash: str
    ) -> ResourceResult | None:
        result = await self.db.execute(
            select(Resource).where(
                Resource.bucket_id == bucket_id,
                Resource.hash == content_hash,
            )
        )
        row = result.scalar_one_or_none()
        return _resource_to_result(row) if row else None

    async def list_by_bucket(
        self, bucket_id: str, skip: int = 0, limit: int = 100
    ) -> list[ResourceResult]:
        result = await self.db.execute(
            select(Resource)
            .where(Resource.bucket_id == bucket_id)
            .order_by(Resource.created_at.desc(), Resource.id.desc())
            .offset(skip)
            .limit(limit)
        )
        return [_resource_to_result(r) for r in result.scalars().all()]

    async def create_resource(self, data: ResourceCreate) -> ResourceResult:
        row = await self.create(_create_to_resource(data))
        return _resource_to_result(row)

    async def delete_by_bucket_and_hash(self, bucket_id: str, content_hash: str) -> bool:
        result = await self.db.execute(
            delete(Resource).where(
                Resource.bucket_id == bucket_id,
                Resource.hash == content_hash,
            )
        )
        return (result.rowcount or 0) > 0

    def _on_integrity_error(self, obj: Resource, exc: IntegrityError) -> DriveException:
        return ResourceAlreadyExistsException(obj.bucket_id, obj.hash)
