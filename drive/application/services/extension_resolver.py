"""Extension resolution for stored file names.

Order: explicit extension, then (multipart) the uploaded file name, then
(stream) the declared media type.
"""

from __future__ import annotations

import mimetypes
import os

from drive.domain.exceptions import ValidationException
from drive.domain.value_objects import FileExtension

DEFAULT_CONTENT_TYPE = "application/octet-stream"

# Media types whose default-table answer is ambiguous or surprising.
_PREFERRED_EXTENSIONS: dict[str, str] = {
    "application/octet-stream": ".bin",
    "image/jpeg": ".jpg",
    "text/plain": ".txt",
    "audio/mpeg": ".mp3",
    "video/mp4": ".mp4",
}

# Built-in tables only; host mime.types files would make results machine-dependent.
_MIME_TABLE = mimetypes.MimeTypes()


def media_type(content_type: str | None) -> str:
    """Return the bare media type (parameters dropped, lower-cased)."""
    if not content_type:
        return DEFAULT_CONTENT_TYPE
    return content_type.split(";", 1)[0].strip().lower() or DEFAULT_CONTENT_TYPE


def extension_for_media_type(content_type: str | None) -> str | None:
    """Extension for a media type, or None when it is unknown."""
    mt = media_type(content_type)
    return _PREFERRED_EXTENSIONS.get(mt) or _MIME_TABLE.guess_extension(mt)


def normalize_extension(value: str, field: str = "extension") -> str:
    """Validate and normalize an extension ("png" -> ".png").

    Raises:
        ValidationException: Disallowed characters or too long.
    """
    try:
        return FileExtension(value).value
    except ValueError as e:
        raise ValidationException(str(e), field=field) from e


def resolve_stream_extension(explicit: str | None, content_type: str | None) -> str:
    """Extension for a raw-body upload.

    Raises:
        ValidationException: Neither an explicit extension nor a known media type.
    """
    if explicit and explicit.strip():
        return normalize_extension(explicit)
    guessed = extension_for_media_type(content_type)
    if not guessed:
        raise ValidationException(
            f"Cannot determine file extension for content type {media_type(content_type)!r}; "
            "send an explicit extension",
            field="extension",
        )
    return normalize_extension(guessed)


def resolve_multipart_extension(explicit: str | None, filename: str | None) -> str:
    """Extension for a multipart upload.

    Empty when the file name has no usable suffix ("README", "notes.v2 (copy)");
    only an explicit extension can fail validation.
    """
    if explicit and explicit.strip():
        return normalize_extension(explicit)
    _, ext = os.path.splitext(os.path.basename(filename or ""))
    if not ext:
        return ""
    try:
        return FileExtension(ext).value
    except ValueError:
        return ""
