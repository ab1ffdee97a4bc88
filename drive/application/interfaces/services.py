"""Service interfaces (ports) for the application layer.

Protocols define contracts for application services (DIP).
"""

from __future__ import annotations

from collections.abc import AsyncIterable, Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from drive.application.dtos.notification import NotificationEvent


# Digest service interface
class IDigestService(Protocol):
    """Protocol for streaming content digests."""

    async def digest_to_file(
        self,
        chunks: AsyncIterable[bytes],
        target: Path,
        max_size: int | None = None,
    ) -> tuple[str, int]:
        """Write chunks to target while hashing; return (hex digest, size)."""
        ...


# Notification dispatcher interface
class INotificationDispatcher(Protocol):
    """Protocol for fire-and-forget webhook notification."""

    def dispatch(
        self,
        event: NotificationEvent,
        extra_headers: Mapping[str, str] | None = None,
    ) -> None:
        """Schedule delivery to matching subscribers and return immediately."""
        ...
