"""Base repository: generic reads, savepoint-guarded create, delete."""

from typing import Any, Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from drive.domain.exceptions import DriveException
from drive.infrastructure.persistence.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Base repository with get_model_by_id, create, delete and a conflict hook.

    create() runs the INSERT inside a SAVEPOINT so a unique-constraint
    violation leaves the caller's transaction usable. Subclasses override
    _on_integrity_error to turn the violation into a domain exception.
    """

    def __init__(self, db: AsyncSession, model: type[ModelType]) -> None:
        self.db = db
        self.model = model

    async def get_model_by_id(self, entity_id: str) -> ModelType | None:
        """Return a single ORM record by primary key, or None."""
        model: Any = self.model
        result = await self.db.execute(select(self.model).where(model.id == entity_id))
        return result.scalar_one_or_none()

    async def create(self, obj: ModelType) -> ModelType:
        """Persist a new record inside a savepoint.

        Raises:
            DriveException: Whatever _on_integrity_error returns, when a
                constraint rejects the row.
        """
        try:
            async with self.db.begin_nested():
                self.db.add(obj)
                await self.db.flush()
        except IntegrityError as exc:
            raise self._on_integrity_error(obj, exc) from exc
        await self.db.refresh(obj)
        return obj

    async def delete(self, obj: ModelType) -> None:
        """Delete the record and flush."""
        await self.db.delete(obj)
        await self.db.flush()

    def _on_integrity_error(self, obj: ModelType, exc: IntegrityError) -> DriveException:
        """Override in subclasses to map constraint violations to domain errors."""
        return DriveException(
            f"Could not persist {self.model.__name__}: constraint violation",
            "INTEGRITY_ERROR",
        )
