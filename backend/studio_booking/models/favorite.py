"""User favorites model for the studio booking core."""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import TIMESTAMP, ForeignKey, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship
import ulid

from ..database import Base

if TYPE_CHECKING:
    from .class_instance import ClassInstance
    from .user import User


class UserFavorite(Base):
    """Junction table for users bookmarking classes."""

    __tablename__ = "user_favorites"

    id: Mapped[str] = mapped_column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))

    user_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    class_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("class_schedule.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), nullable=False
    )

    user: Mapped["User"] = relationship("User", back_populates="favorites")
    class_instance: Mapped["ClassInstance"] = relationship("ClassInstance")

    __table_args__ = (UniqueConstraint("user_id", "class_id", name="unique_user_class_favorite"),)

    def __repr__(self) -> str:
        return f"<UserFavorite(user={self.user_id}, class={self.class_id})>"
