"""DTOs for resource use cases (no dependency on ORM)."""

from collections.abc import AsyncIterator
from dataclasses import dataclass
from datetime import datetime

from drive.domain.value_objects import build_filename


@dataclass(frozen=True)
class ResourceCreate:
    """Input for creating a resource record (write-model). Pipeline builds this after the blob is placed."""

    bucket_id: str
    hash: str
    size: int
    content_type: str
    extension: str


@dataclass(frozen=True)
class ResourceResult:
    """Resource read-model (result of get, list, create)."""

    id: str
    bucket_id: str
    hash: str
    size: int
    content_type: str
    extension: str
    created_at: datetime

    @property
    def filename(self) -> str:
        """Storage file name: {hash}{extension}."""
        return build_filename(self.hash, self.extension)


@dataclass(frozen=True)
class ResourceUploadResult:
    """Outcome of an upload. created is False when the content was already stored in the bucket."""

    resource: ResourceResult
    created: bool
    url: str
    public_url: str | None = None


@dataclass(frozen=True)
class ResourceContent:
    """A resource with its blob content as a chunk iterator (for downloads)."""

    resource: ResourceResult
    chunks: AsyncIterator[bytes]


@dataclass(frozen=True)
class ResourceView:
    """A resource with the URLs it is reachable at (public_url only for public buckets)."""

    resource: ResourceResult
    url: str
    public_url: str | None = None
