"""Content store interface (port). Implementation: LocalContentStore."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import AbstractAsyncContextManager
from pathlib import Path
from typing import Protocol


class IContentStore(Protocol):
    """Protocol for the blob store addressed by (bucket_id, filename)."""

    def scratch_file(self) -> AbstractAsyncContextManager[Path]:
        """Reserve a scratch path for staging an upload; removed on exit if still present."""
        ...

    async def write(self, bucket_id: str, filename: str, source_path: Path) -> Path:
        """Move a fully written scratch file into place. Readers never see a partial blob."""
        ...

    async def open(self, bucket_id: str, filename: str) -> AsyncIterator[bytes]:
        """Open blob and return a chunk iterator. Raises StorageNotFoundError if absent."""
        ...

    async def remove(self, bucket_id: str, filename: str) -> bool:
        """Delete blob. Returns False if it was already absent."""
        ...

    async def exists(self, bucket_id: str, filename: str) -> bool:
        """Return True if the blob exists."""
        ...
