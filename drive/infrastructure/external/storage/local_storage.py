"""Local filesystem content store with path validation and atomic placement."""

from __future__ import annotations

import errno
import os
import tempfile
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import aiofiles
import aiofiles.os
from aiofiles.threadpool.binary import AsyncBufferedReader

from drive.infrastructure.exceptions import (
    StorageDeleteError,
    StorageNotFoundError,
    StoragePermissionError,
    StorageReadError,
    StorageWriteError,
)
from drive.shared.telemetry.logging import get_logger
from drive.shared.utils.generators import generate_scratch_name

logger = get_logger(__name__)


class LocalContentStore:
    """Blob store laid out as {storage_root}/{bucket_id}/{filename}.

    Uploads are staged in a scratch directory and moved into place with a
    rename, so a blob is either absent or complete. When scratch and
    storage live on different filesystems the file is copied to a temp
    name beside the target and renamed from there.
    """

    CHUNK_SIZE = 64 * 1024  # 64KB

    def __init__(self, storage_root: str, scratch_dir: str | None = None) -> None:
        """Initialize local storage.

        Args:
            storage_root: Base directory for all buckets.
            scratch_dir: Staging directory for in-flight uploads
                (default: {storage_root}/.scratch).
        """
        self.storage_root = Path(storage_root).resolve()
        self.storage_root.mkdir(parents=True, exist_ok=True, mode=0o750)
        self.scratch_root = (
            Path(scratch_dir).resolve() if scratch_dir else self.storage_root / ".scratch"
        )
        self.scratch_root.mkdir(parents=True, exist_ok=True, mode=0o750)

    def _get_full_path(self, bucket_id: str, filename: str) -> Path:
        """Resolve and validate path under storage_root. Raises StoragePermissionError on traversal."""
        ref = f"{bucket_id}/{filename}"
        for part in (bucket_id, filename):
            if (
                not part
                or part.startswith(".")
                or "/" in part
                or "\\" in part
                or "\x00" in part
            ):
                raise StoragePermissionError(ref, "path_validation")
        full_path = (self.storage_root / bucket_id / filename).resolve()
        try:
            full_path.relative_to(self.storage_root)
        except ValueError as e:
            raise StoragePermissionError(ref, "path_validation") from e
        return full_path

    @asynccontextmanager
    async def scratch_file(self) -> AsyncIterator[Path]:
        """Yield a fresh scratch path; remove whatever is left there on exit."""
        path = self.scratch_root / generate_scratch_name()
        try:
            yield path
        finally:
            try:
                await aiofiles.os.remove(path)
            except FileNotFoundError:
                pass
            except OSError as e:
                logger.warning("Failed to remove scratch file %s: %s", path, e)

    async def write(self, bucket_id: str, filename: str, source_path: Path) -> Path:
        """Move a complete file from source_path to {bucket_id}/{filename}.

        Overwrites an existing blob of the same name, which by construction
        has identical content.

        Raises:
            StoragePermissionError: Invalid bucket_id or filename.
            StorageWriteError: The move or copy failed.
        """
        target_path = self._get_full_path(bucket_id, filename)
        try:
            target_path.parent.mkdir(parents=True, exist_ok=True, mode=0o750)
            os.chmod(source_path, 0o640)
            try:
                await aiofiles.os.replace(source_path, target_path)
            except OSError as e:
                if e.errno != errno.EXDEV:
                    raise
                await self._copy_into_place(source_path, target_path)
        except OSError as e:
            raise StorageWriteError(f"{bucket_id}/{filename}", str(e)) from e
        logger.debug("Placed blob %s/%s", bucket_id, filename)
        return target_path

    async def _copy_into_place(self, source_path: Path, target_path: Path) -> None:
        """Cross-device placement: copy to a temp file beside the target, then rename."""
        temp_fd, temp_path = tempfile.mkstemp(
            dir=target_path.parent,
            prefix=".tmp_",
            suffix=target_path.suffix,
        )
        os.close(temp_fd)
        try:
            async with aiofiles.open(source_path, "rb") as src, aiofiles.open(
                temp_path, "wb"
            ) as dst:
                while chunk := await src.read(self.CHUNK_SIZE):
                    await dst.write(chunk)
            os.chmod(temp_path, 0o640)
            await aiofiles.os.replace(temp_path, target_path)
            await aiofiles.os.remove(source_path)
        finally:
            if Path(temp_path).exists():
                os.unlink(temp_path)

    async def open(self, bucket_id: str, filename: str) -> AsyncIterator[bytes]:
        """Open the blob and return an iterator over its chunks.

        The file is opened eagerly so a missing blob fails here rather than
        mid-stream.

        Raises:
            StorageNotFoundError: Blob does not exist.
            StorageReadError: Blob could not be opened.
        """
        file_path = self._get_full_path(bucket_id, filename)
        ref = f"{bucket_id}/{filename}"
        try:
            handle = await aiofiles.open(file_path, "rb")
        except FileNotFoundError as e:
            raise StorageNotFoundError(ref) from e
        except OSError as e:
            raise StorageReadError(ref, str(e)) from e
        return self._iter_chunks(handle, ref)

    async def _iter_chunks(
        self, handle: AsyncBufferedReader, ref: str
    ) -> AsyncIterator[bytes]:
        try:
            while chunk := await handle.read(self.CHUNK_SIZE):
                yield chunk
        except OSError as e:
            raise StorageReadError(ref, str(e)) from e
        finally:
            await handle.close()

    async def remove(self, bucket_id: str, filename: str) -> bool:
        """Delete blob. Returns True if deleted, False if it was already absent."""
        file_path = self._get_full_path(bucket_id, filename)
        try:
            await aiofiles.os.remove(file_path)
        except FileNotFoundError:
            return False
        except OSError as e:
            raise StorageDeleteError(f"{bucket_id}/{filename}", str(e)) from e
        return True

    async def exists(self, bucket_id: str, filename: str) -> bool:
        """Return True if the blob exists."""
        try:
            return self._get_full_path(bucket_id, filename).is_file()
        except StoragePermissionError:
            return False
