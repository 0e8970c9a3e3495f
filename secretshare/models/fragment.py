import uuid
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from secretshare.database import Base

if TYPE_CHECKING:
    from secretshare.models.secret import Secret


class SecretFragment(Base):
    __tablename__ = "secret_fragments"
    __table_args__ = (UniqueConstraint("secret_id", "order_index", name="uq_fragment_order"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    secret_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("secrets.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    order_index: Mapped[int] = mapped_column(Integer, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)

    secret: Mapped["Secret"] = relationship(back_populates="fragments")
