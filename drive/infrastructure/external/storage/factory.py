"""Content store factory: creates the storage backend from settings."""

from __future__ import annotations

from typing import TYPE_CHECKING

from drive.application.interfaces.storage import IContentStore

if TYPE_CHECKING:
    from drive.core.config import Settings


class StorageFactory:
    """Factory for content store instances based on configuration."""

    @staticmethod
    def create_content_store(settings: "Settings | None" = None) -> IContentStore:
        """Create the content store from settings.

        Args:
            settings: Application settings; if None, uses get_settings().

        Returns:
            LocalContentStore rooted at STORAGE_ROOT.

        Raises:
            ValueError: Missing required config.
        """
        from drive.core.config import get_settings
        from drive.infrastructure.external.storage.local_storage import (
            LocalContentStore,
        )

        s = settings or get_settings()
        if not s.storage_root:
            raise ValueError("STORAGE_ROOT required for local storage")
        return LocalContentStore(
            storage_root=s.storage_root,
            scratch_dir=s.storage_scratch_dir,
        )
