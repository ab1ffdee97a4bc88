"""Resource API schemas."""

from datetime import datetime

from pydantic import BaseModel, Field

from drive.application.dtos.resource import ResourceResult


class ResourceResponse(BaseModel):
    """A stored resource as returned by upload, get and list."""

    id: str
    bucket_id: str
    hash: str = Field(..., description="SHA-256 of the content (hex)")
    size: int
    content_type: str
    extension: str
    created_at: datetime
    url: str = Field(..., description="Authenticated download URL")
    public_url: str | None = Field(
        default=None, description="Anonymous download URL (public buckets only)"
    )

    @classmethod
    def from_result(
        cls, resource: ResourceResult, url: str, public_url: str | None = None
    ) -> "ResourceResponse":
        return cls(
            id=resource.id,
            bucket_id=resource.bucket_id,
            hash=resource.hash,
            size=resource.size,
            content_type=resource.content_type,
            extension=resource.extension,
            created_at=resource.created_at,
            url=url,
            public_url=public_url,
        )
