"""Unit of work over one AsyncSession: explicit write transaction and commit."""

from sqlalchemy.ext.asyncio import AsyncSession

from drive.infrastructure.persistence.database import begin_write


class SqlAlchemyUnitOfWork:
    """Transaction boundary for use cases that act on committed state.

    Resource upload and delete commit here before dispatching webhooks or
    removing blobs. The session is closed (and any open transaction rolled
    back) by the get_db dependency.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def begin(self) -> None:
        await begin_write(self.session)

    async def commit(self) -> None:
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()
