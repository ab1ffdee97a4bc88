"""Digest service: streaming content hashing for uploads."""

from __future__ import annotations

import hashlib
from abc import ABC, abstractmethod
from collections.abc import AsyncIterable
from pathlib import Path
from typing import Any

import aiofiles

from drive.domain.exceptions import PayloadTooLargeException


class DigestAlgorithm(ABC):
    """Abstract digest algorithm (OCP)."""

    name: str

    @abstractmethod
    def new(self) -> Any:
        """Return a fresh hashlib-style hasher (update/hexdigest)."""
        ...


class SHA256Algorithm(DigestAlgorithm):
    """SHA-256 implementation (64 hex chars)."""

    name = "sha256"

    def new(self) -> Any:
        return hashlib.sha256()


class DigestService:
    """Single source of truth for resource digests (IDigestService).

    Hashing happens while the bytes are written to scratch, so content is
    read exactly once.
    """

    CHUNK_SIZE = 64 * 1024  # 64KB

    def __init__(self, algorithm: DigestAlgorithm | None = None) -> None:
        self.algorithm = algorithm or SHA256Algorithm()

    def digest_bytes(self, data: bytes) -> str:
        """Digest of an in-memory payload."""
        hasher = self.algorithm.new()
        hasher.update(data)
        return hasher.hexdigest()

    async def digest_to_file(
        self,
        chunks: AsyncIterable[bytes],
        target: Path,
        max_size: int | None = None,
    ) -> tuple[str, int]:
        """Write chunks to target while hashing them.

        Args:
            chunks: Upload body.
            target: Scratch file to create.
            max_size: Abort once more than this many bytes arrived (None = no limit).

        Returns:
            (hex digest, byte count).

        Raises:
            PayloadTooLargeException: More than max_size bytes were received.
        """
        hasher = self.algorithm.new()
        size = 0
        async with aiofiles.open(target, "wb") as f:
            async for chunk in chunks:
                if not chunk:
                    continue
                size += len(chunk)
                if max_size is not None and size > max_size:
                    raise PayloadTooLargeException(max_size)
                hasher.update(chunk)
                await f.write(chunk)
        return hasher.hexdigest(), size

    async def digest_file(self, path: Path) -> tuple[str, int]:
        """Digest and size of an existing file."""
        hasher = self.algorithm.new()
        size = 0
        async with aiofiles.open(path, "rb") as f:
            while chunk := await f.read(self.CHUNK_SIZE):
                size += len(chunk)
                hasher.update(chunk)
        return hasher.hexdigest(), size
