import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from secretshare.database import Base

if TYPE_CHECKING:
    from secretshare.models.secret import Secret


class SecretMapping(Base):
    """Short id -> secret id, with its own expiration checked on the primary path."""

    __tablename__ = "secret_mappings"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    short_id: Mapped[str] = mapped_column(String(16), unique=True, nullable=False)
    secret_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("secrets.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    secret: Mapped["Secret"] = relationship(back_populates="mappings")
