"""Core app configuration, database, errors and security."""

from calcsaas.core.config import Settings, get_settings
from calcsaas.core.database import get_db

__all__ = ["Settings", "get_settings", "get_db"]
