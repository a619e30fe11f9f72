"""
SQLAlchemy ORM models for property baseline data.

The underwriting engine only reads from these tables; projections are
recomputed on request and never stored.
"""

from datetime import datetime
from sqlalchemy import (
    Column,
    String,
    Float,
    Integer,
    Boolean,
    DateTime,
    ForeignKey,
)
from sqlalchemy.orm import declarative_base, relationship
import uuid

Base = declarative_base()


def generate_uuid():
    return str(uuid.uuid4())


class AuditMixin:
    """Mixin for audit fields on all models."""

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )
    is_deleted = Column(Boolean, default=False, nullable=False)


class Property(AuditMixin, Base):
    """Property model representing a real estate asset."""

    __tablename__ = "properties"

    id = Column(String, primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False)

    # Address
    address_street = Column(String(255))
    address_city = Column(String(100))
    address_state = Column(String(50))
    address_zip = Column(String(20))

    property_type = Column(String(50), default="multifamily")

    # Most recent fiscal year financials (from the offering memorandum)
    y1_gross_scheduled_revenue = Column(Float)
    y1_total_operating_expenses = Column(Float)
    y1_net_operating_income = Column(Float)

    # Relationships
    pricing_tiers = relationship(
        "PricingTier",
        back_populates="property",
        cascade="all, delete-orphan",
        order_by="PricingTier.position",
    )


class PricingTier(AuditMixin, Base):
    """Broker pricing guidance (BOV tier) for a property."""

    __tablename__ = "pricing_tiers"

    id = Column(String, primary_key=True, default=generate_uuid)
    property_id = Column(String, ForeignKey("properties.id"), nullable=False)

    position = Column(Integer, default=0, nullable=False)
    tier_label = Column(String(100))
    pricing = Column(Float)
    # Stored as reported; may be a decimal (0.055) or a percentage (5.5)
    terminal_cap_rate = Column(Float)

    property = relationship("Property", back_populates="pricing_tiers")
