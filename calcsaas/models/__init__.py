"""SQLAlchemy ORM models."""

from calcsaas.models.base import Base
from calcsaas.models.calculation import Calculation
from calcsaas.models.user import User

__all__ = ["Base", "Calculation", "User"]
