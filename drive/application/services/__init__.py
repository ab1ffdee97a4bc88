"""Application services: digests, extension resolution, resource URLs."""

from drive.application.services.digest_service import (
    DigestAlgorithm,
    DigestService,
    SHA256Algorithm,
)
from drive.application.services.extension_resolver import (
    extension_for_media_type,
    media_type,
    normalize_extension,
    resolve_multipart_extension,
    resolve_stream_extension,
)
from drive.application.services.resource_urls import ResourceUrlBuilder

__all__ = [
    "DigestAlgorithm",
    "DigestService",
    "ResourceUrlBuilder",
    "SHA256Algorithm",
    "extension_for_media_type",
    "media_type",
    "normalize_extension",
    "resolve_multipart_extension",
    "resolve_stream_extension",
]
