"""Create a bucket for a client and print a bearer token for it.

Usage:
    python -m scripts.create_bucket <client_id> <bucket_name> [--public]
Reuses the bucket when the client already has one with that name.
Creates missing tables first (same as app startup with DATABASE_AUTO_CREATE).
"""

import asyncio
import sys

from drive.core.config import get_settings
from drive.infrastructure.persistence.database import (
    dispose_engine,
    get_session_factory,
    init_models,
)
from drive.infrastructure.persistence.repositories import BucketRepository
from drive.infrastructure.security.jwt import create_access_token


async def main() -> None:
    """Create (or find) the bucket, then print its id and a token for the client."""
    args = [a for a in sys.argv[1:] if a != "--public"]
    if len(args) != 2:
        print(
            "Usage: python -m scripts.create_bucket <client_id> <bucket_name> [--public]",
            file=sys.stderr,
        )
        sys.exit(1)
    client_id, name = args
    is_public = "--public" in sys.argv[1:]

    get_settings()
    await init_models()
    try:
        async with get_session_factory()() as session:
            async with session.begin():
                repo = BucketRepository(session)
                bucket = await repo.get_by_name_and_client(name, client_id)
                if bucket is None:
                    bucket = await repo.create_bucket(name, client_id, is_public=is_public)
                    print(f"Created bucket: {bucket.id} ({name}) for client {client_id}")
                else:
                    print(f"Bucket exists: {bucket.id} ({name}) for client {client_id}")
    finally:
        await dispose_engine()

    print(f"Token: {create_access_token(client_id)}")


if __name__ == "__main__":
    asyncio.run(main())
