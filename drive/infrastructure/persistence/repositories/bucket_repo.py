"""Bucket repository. Read-only; returns application DTOs."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from drive.application.dtos.bucket import BucketResult
from drive.infrastructure.persistence.models.bucket import Bucket
from drive.infrastructure.persistence.repositories.base import BaseRepository
from drive.shared.utils.datetime import ensure_utc


def _bucket_to_result(b: Bucket) -> BucketResult:
    """Map ORM Bucket to application BucketResult."""
    return BucketResult(
        id=b.id,
        name=b.name,
        client_id=b.client_id,
        is_public=b.is_public,
        created_at=ensure_utc(b.created_at) or b.created_at,
        updated_at=ensure_utc(b.updated_at) or b.updated_at,
    )


class BucketRepository(BaseRepository[Bucket]):
    """Bucket repository (IBucketRepository)."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Bucket)

    async def get_by_id(self, bucket_id: str) -> BucketResult | None:
        row = await self.get_model_by_id(bucket_id)
        return _bucket_to_result(row) if row else None

    async def get_by_name_and_client(self, name: str, client_id: str) -> BucketResult | None:
        result = await self.db.execute(
            select(Bucket).where(Bucket.name == name, Bucket.client_id == client_id)
        )
        row = result.scalar_one_or_none()
        return _bucket_to_result(row) if row else None

    async def create_bucket(
        self, name: str, client_id: str, *, is_public: bool = False
    ) -> BucketResult:
        """Insert a bucket (provisioning scripts and tests; the API does not manage buckets)."""
        row = await self.create(Bucket(name=name, client_id=client_id, is_public=is_public))
        return _bucket_to_result(row)
