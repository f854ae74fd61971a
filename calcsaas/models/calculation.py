"""ORM model for persisted calculation history."""

from datetime import UTC, datetime

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String, Text

from calcsaas.models.base import Base


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Calculation(Base):
    """
    One evaluated expression. Rows are only inserted or bulk-deleted per user.

    id doubles as the insertion sequence used to break created_at ties.
    """

    __tablename__ = "calculations"
    __table_args__ = (
        Index("ix_calculations_user_id_created_at", "user_id", "created_at"),
        {"sqlite_autoincrement": True},
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    expression = Column(Text, nullable=False)
    result = Column(String(64), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
