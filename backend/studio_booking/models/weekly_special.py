"""Promotional records shown as the studio's current special."""

from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.sql import func
import ulid

from ..database import Base


class WeeklySpecial(Base):
    __tablename__ = "weekly_specials"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    title = Column(String(120), nullable=False)
    description = Column(Text, nullable=True)
    discount_percentage = Column(Integer, nullable=True)
    valid_from = Column(Date, nullable=False, index=True)
    valid_until = Column(Date, nullable=False, index=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_by = Column(String(26), ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def __repr__(self) -> str:
        return f"<WeeklySpecial {self.title} {self.valid_from}..{self.valid_until}>"
