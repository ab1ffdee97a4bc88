"""Tests for extension resolution (explicit, file name, media type)."""

import pytest

from drive.application.services.extension_resolver import (
    extension_for_media_type,
    media_type,
    resolve_multipart_extension,
    resolve_stream_extension,
)
from drive.domain.exceptions import ValidationException


class TestMediaType:
    def test_parameters_dropped(self) -> None:
        assert media_type("Text/Plain; charset=utf-8") == "text/plain"

    def test_missing_defaults_to_octet_stream(self) -> None:
        assert media_type(None) == "application/octet-stream"
        assert media_type("") == "application/octet-stream"


class TestExtensionForMediaType:
    def test_preferred_table(self) -> None:
        assert extension_for_media_type("image/jpeg") == ".jpg"
        assert extension_for_media_type("application/octet-stream") == ".bin"
        assert extension_for_media_type("text/plain") == ".txt"

    def test_builtin_table(self) -> None:
        assert extension_for_media_type("image/png") == ".png"

    def test_unknown_is_none(self) -> None:
        assert extension_for_media_type("application/x-made-up-type") is None


class TestResolveStreamExtension:
    def test_explicit_wins(self) -> None:
        assert resolve_stream_extension(".bin", "image/png") == ".bin"

    def test_explicit_without_dot(self) -> None:
        assert resolve_stream_extension("gz", None) == ".gz"

    def test_from_content_type(self) -> None:
        assert resolve_stream_extension(None, "image/png") == ".png"

    def test_blank_explicit_falls_back(self) -> None:
        assert resolve_stream_extension("  ", "image/jpeg") == ".jpg"

    def test_unknown_type_raises(self) -> None:
        with pytest.raises(ValidationException) as exc_info:
            resolve_stream_extension(None, "application/x-made-up-type")
        assert exc_info.value.details == {"field": "extension"}

    def test_invalid_explicit_raises(self) -> None:
        with pytest.raises(ValidationException):
            resolve_stream_extension("../x", None)


class TestResolveMultipartExtension:
    def test_explicit_wins(self) -> None:
        assert resolve_multipart_extension(".png", "photo.jpg") == ".png"

    def test_from_filename(self) -> None:
        assert resolve_multipart_extension(None, "photo.JPG") == ".JPG"

    def test_last_suffix_only(self) -> None:
        assert resolve_multipart_extension(None, "archive.tar.gz") == ".gz"

    def test_path_components_ignored(self) -> None:
        assert resolve_multipart_extension(None, "dir/sub/file.txt") == ".txt"

    def test_no_extension_is_empty(self) -> None:
        assert resolve_multipart_extension(None, "README") == ""
        assert resolve_multipart_extension(None, None) == ""

    def test_unusable_suffix_is_empty(self) -> None:
        assert resolve_multipart_extension(None, "notes.v2 (copy)") == ""
        assert resolve_multipart_extension(None, "shot.p!ng") == ""

    def test_invalid_explicit_still_raises(self) -> None:
        with pytest.raises(ValidationException):
            resolve_multipart_extension("../x", "photo.jpg")
