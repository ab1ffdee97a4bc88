"""Domain value objects for Drive.

Value objects are immutable types that represent domain concepts with
self-validation. They have no identity, only value.
"""

import re
from dataclasses import dataclass
from typing import ClassVar

_HEX_RE = re.compile(r"^[0-9a-f]+$")


@dataclass(frozen=True)
class ContentDigest:
    """Value object for a resource content digest (SHA-256, 64 lowercase hex chars).

    The digest is also the blob's storage name, so anything that is not
    strict hex is rejected before it can reach a filesystem path.
    """

    LENGTH: ClassVar[int] = 64

    value: str

    def __post_init__(self) -> None:
        """Normalize to lowercase and validate length and hex characters.

        Raises:
            ValueError: If empty, wrong length, or non-hex.
        """
        object.__setattr__(self, "value", (self.value or "").strip().lower())
        if not self.value:
            raise ValueError("Digest must be a non-empty string")
        if len(self.value) != self.LENGTH:
            raise ValueError(
                f"Digest must be a SHA-256 hex string ({self.LENGTH} chars)"
            )
        if not _HEX_RE.fullmatch(self.value):
            raise ValueError("Digest must contain only hexadecimal characters")

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class FileExtension:
    """Value object for a stored file-name extension.

    Always empty or starting with a single ".", e.g. ".jpg" or ".tar.gz".
    "jpg" is normalized to ".jpg". Path separators and control characters
    are rejected.
    """

    MAX_LENGTH: ClassVar[int] = 32
    _ALLOWED: ClassVar[re.Pattern[str]] = re.compile(r"^(\.[A-Za-z0-9_+-]+)+$")

    value: str

    def __post_init__(self) -> None:
        """Normalize leading separator and validate characters.

        Raises:
            ValueError: If too long or containing disallowed characters.
        """
        raw = (self.value or "").strip()
        if raw and not raw.startswith("."):
            raw = "." + raw
        object.__setattr__(self, "value", raw)
        if not raw:
            return
        if len(raw) > self.MAX_LENGTH:
            raise ValueError(
                f"Extension must be at most {self.MAX_LENGTH} characters"
            )
        if not self._ALLOWED.fullmatch(raw):
            raise ValueError(
                "Extension may contain only letters, digits, '_', '+', '-' and '.' separators"
            )

    def __str__(self) -> str:
        return self.value


def build_filename(digest: str, extension: str) -> str:
    """Return the storage file name for a resource: {digest}{extension}."""
    return f"{digest}{extension}"
