"""Resource ORM model. Content-addressed blob metadata, immutable once created."""

from sqlalchemy import BigInteger, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from drive.infrastructure.persistence.database import Base
from drive.infrastructure.persistence.models.mixins import CreatedAtMixin, CuidMixin


class Resource(CuidMixin, CreatedAtMixin, Base):
    """Resource entity. Table: resource.

    (bucket_id, hash) is unique: it is the dedup key and the only
    synchronization point between concurrent uploads of the same content.
    """

    __tablename__ = "resource"

    bucket_id: Mapped[str] = mapped_column(
        String, ForeignKey("bucket.id", ondelete="CASCADE"), nullable=False, index=True
    )
    hash: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    size: Mapped[int] = mapped_column(BigInteger, nullable=False)
    content_type: Mapped[str] = mapped_column(String, nullable=False)
    extension: Mapped[str] = mapped_column(String, nullable=False, default="")

    __table_args__ = (
        UniqueConstraint("bucket_id", "hash", name="ux_resource_bucket_hash"),
    )
