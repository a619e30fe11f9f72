"""
Database configuration and models.
"""

from app.db.database import engine, SessionLocal, get_db, get_db_context
from app.db.models import Base, Property, PricingTier

__all__ = [
    "engine",
    "SessionLocal",
    "get_db",
    "get_db_context",
    "Base",
    "Property",
    "PricingTier",
]
