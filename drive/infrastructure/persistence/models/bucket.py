"""Bucket ORM model. Owned and managed outside the resource core; read-only here."""

from sqlalchemy import Boolean, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from drive.infrastructure.persistence.database import Base
from drive.infrastructure.persistence.models.mixins import CuidMixin, TimestampMixin


class Bucket(CuidMixin, TimestampMixin, Base):
    """Bucket entity. Table: bucket. One owning client; optional public visibility."""

    __tablename__ = "bucket"

    name: Mapped[str] = mapped_column(String, nullable=False, index=True)
    client_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    is_public: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    __table_args__ = (
        UniqueConstraint("name", "client_id", name="ux_bucket_name_client"),
    )
