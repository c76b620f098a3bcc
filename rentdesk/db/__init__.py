"""
Database init - Exports for routes
"""

from .base import Base, TimestampMixin, generate_code, str_enum, utcnow
from rentdesk.database import engine, SessionLocal, get_db

__all__ = [
    "Base",
    "TimestampMixin",
    "generate_code",
    "str_enum",
    "utcnow",
    "engine",
    "SessionLocal",
    "get_db",
]
