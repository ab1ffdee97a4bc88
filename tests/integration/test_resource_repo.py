"""Resource and bucket repository integration tests against SQLite.

Each test runs in its own database; the session is rolled back after the test.
"""

import pytest

from drive.application.dtos.resource import ResourceCreate
from drive.domain.exceptions import ResourceAlreadyExistsException
from drive.infrastructure.persistence.repositories import (
    BucketRepository,
    ResourceRepository,
)

DIGEST_A = "a" * 64
DIGEST_B = "b" * 64


def _create(bucket_id: str, digest: str = DIGEST_A, extension: str = ".bin") -> ResourceCreate:
    return ResourceCreate(
        bucket_id=bucket_id,
        hash=digest,
        size=1024,
        content_type="application/octet-stream",
        extension=extension,
    )


@pytest.fixture
async def bucket(db_session):
    return await BucketRepository(db_session).create_bucket("photos", "client-a")


async def test_bucket_lookup(db_session, bucket) -> None:
    repo = BucketRepository(db_session)
    found = await repo.get_by_id(bucket.id)
    assert found == bucket
    assert found.created_at.tzinfo is not None
    assert await repo.get_by_name_and_client("photos", "client-a") == bucket
    assert await repo.get_by_name_and_client("photos", "client-b") is None
    assert await repo.get_by_id("missing") is None


async def test_create_and_get_by_bucket_and_hash(db_session, bucket) -> None:
    repo = ResourceRepository(db_session)
    created = await repo.create_resource(_create(bucket.id))
    assert created.id
    assert created.filename == f"{DIGEST_A}.bin"

    found = await repo.get_by_bucket_and_hash(bucket.id, DIGEST_A)
    assert found == created
    assert await repo.get_by_id(created.id) == created
    assert await repo.get_by_bucket_and_hash(bucket.id, DIGEST_B) is None


async def test_duplicate_insert_is_already_exists(db_session, bucket) -> None:
    """The unique (bucket_id, hash) constraint fails distinctly, and the session stays usable."""
    repo = ResourceRepository(db_session)
    first = await repo.create_resource(_create(bucket.id))
    with pytest.raises(ResourceAlreadyExistsException) as exc_info:
        await repo.create_resource(_create(bucket.id, extension=".dat"))
    assert exc_info.value.details == {"bucket_id": bucket.id, "hash": DIGEST_A}
    assert await repo.get_by_bucket_and_hash(bucket.id, DIGEST_A) == first


async def test_same_content_in_two_buckets(db_session, bucket) -> None:
    other = await BucketRepository(db_session).create_bucket("docs", "client-a")
    repo = ResourceRepository(db_session)
    a = await repo.create_resource(_create(bucket.id))
    b = await repo.create_resource(_create(other.id))
    assert a.id != b.id


async def test_list_newest_first_with_paging(db_session, bucket) -> None:
    repo = ResourceRepository(db_session)
    first = await repo.create_resource(_create(bucket.id, DIGEST_A))
    second = await repo.create_resource(_create(bucket.id, DIGEST_B))
    listed = await repo.list_by_bucket(bucket.id)
    assert [r.id for r in listed] == [second.id, first.id]
    assert [r.id for r in await repo.list_by_bucket(bucket.id, skip=1, limit=1)] == [first.id]


async def test_delete_by_bucket_and_hash(db_session, bucket) -> None:
    repo = ResourceRepository(db_session)
    await repo.create_resource(_create(bucket.id))
    assert await repo.delete_by_bucket_and_hash(bucket.id, DIGEST_A) is True
    assert await repo.get_by_bucket_and_hash(bucket.id, DIGEST_A) is None
    assert await repo.delete_by_bucket_and_hash(bucket.id, DIGEST_A) is False
    # The key is free again.
    again = await repo.create_resource(_create(bucket.id))
    assert again.hash == DIGEST_A
