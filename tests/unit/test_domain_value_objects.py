"""Tests for domain value objects (ContentDigest, FileExtension) and enums."""

import pytest

from drive.domain.enums import WebhookEventType
from drive.domain.value_objects.core import ContentDigest, FileExtension, build_filename


class TestContentDigest:
    """ContentDigest: 64 hex chars, normalized to lowercase."""

    def test_valid_digest(self) -> None:
        assert ContentDigest("a" * 64).value == "a" * 64

    def test_uppercase_normalized(self) -> None:
        assert ContentDigest("AB" * 32).value == "ab" * 32

    def test_empty_rejected(self) -> None:
        with pytest.raises(ValueError, match="non-empty"):
            ContentDigest("")

    def test_wrong_length_rejected(self) -> None:
        with pytest.raises(ValueError, match="64"):
            ContentDigest("a" * 63)

    def test_non_hex_rejected(self) -> None:
        with pytest.raises(ValueError, match="hexadecimal"):
            ContentDigest("g" * 64)

    def test_path_like_rejected(self) -> None:
        with pytest.raises(ValueError):
            ContentDigest("../" + "a" * 61)


class TestFileExtension:
    """FileExtension: empty or dot-prefixed segments of safe characters."""

    def test_empty_allowed(self) -> None:
        assert FileExtension("").value == ""

    def test_dot_prefixed(self) -> None:
        assert FileExtension(".jpg").value == ".jpg"

    def test_dot_added(self) -> None:
        assert FileExtension("png").value == ".png"

    def test_multi_segment(self) -> None:
        assert FileExtension(".tar.gz").value == ".tar.gz"

    def test_separator_rejected(self) -> None:
        with pytest.raises(ValueError, match="letters"):
            FileExtension("./etc")
        with pytest.raises(ValueError, match="letters"):
            FileExtension(".a\\b")

    def test_double_dot_rejected(self) -> None:
        with pytest.raises(ValueError):
            FileExtension("..")

    def test_too_long_rejected(self) -> None:
        with pytest.raises(ValueError, match="at most"):
            FileExtension("." + "a" * 40)


def test_build_filename() -> None:
    assert build_filename("ab" * 32, ".bin") == "ab" * 32 + ".bin"
    assert build_filename("ab" * 32, "") == "ab" * 32


def test_webhook_event_type_values() -> None:
    assert WebhookEventType.values() == ["resource.new", "resource.deleted"]
    assert WebhookEventType.RESOURCE_NEW.value == "resource.new"
