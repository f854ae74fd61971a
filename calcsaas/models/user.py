"""ORM model for application users."""

from datetime import UTC, datetime

from sqlalchemy import Column, DateTime, Integer, String

from calcsaas.models.base import Base


def _utcnow() -> datetime:
    return datetime.now(UTC)


class User(Base):
    """
    User account for JWT authentication.

    username and email are case-sensitive unique keys. The id is never reused,
    including on SQLite (AUTOINCREMENT).
    """

    __tablename__ = "users"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), nullable=False, unique=True, index=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
