from datetime import datetime

from sqlalchemy import Boolean, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from secretshare.database import Base
from secretshare.models.fragment import SecretFragment
from secretshare.models.mapping import SecretMapping


class Secret(Base):
    """
    Authoritative record for a shared secret.

    The payload itself lives in ``secret_fragments``. Deleting a Secret through
    the ORM removes its fragments and short-link mappings; access grants are
    keyed by secret id only and are left alone.
    """

    __tablename__ = "secrets"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    password_hash: Mapped[str | None] = mapped_column(String(128), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime, index=True, nullable=False)

    fragment_count: Mapped[int] = mapped_column(Integer, nullable=False)
    extendable: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    email: Mapped[str | None] = mapped_column(Text, nullable=True)

    fragments: Mapped[list[SecretFragment]] = relationship(
        back_populates="secret",
        cascade="all, delete-orphan",
        order_by=SecretFragment.order_index,
    )
    mappings: Mapped[list[SecretMapping]] = relationship(
        back_populates="secret",
        cascade="all, delete-orphan",
    )
