"""
Property API endpoints.

Properties carry the baseline financials and pricing guidance that seed
the quick underwriting calculator.
"""

from fastapi import APIRouter, HTTPException, Depends
from pydantic import BaseModel
from typing import Optional, List
from sqlalchemy.orm import Session

from app.api.calculations import AssumptionInput, UnderwritingResponse, run_underwriting
from app.calculations.inputs import Baseline, PricingGuidance
from app.db.database import get_db
from app.db.models import Property, PricingTier

router = APIRouter()


class PricingTierSchema(BaseModel):
    """Pricing tier as supplied by the broker package."""

    tier_label: Optional[str] = None
    pricing: Optional[float] = None
    terminal_cap_rate: Optional[float] = None

    class Config:
        from_attributes = True


class PropertyCreate(BaseModel):
    """Schema for creating a property."""

    name: str
    address_street: Optional[str] = None
    address_city: Optional[str] = None
    address_state: Optional[str] = None
    address_zip: Optional[str] = None
    property_type: str = "multifamily"
    y1_gross_scheduled_revenue: Optional[float] = None
    y1_total_operating_expenses: Optional[float] = None
    y1_net_operating_income: Optional[float] = None
    pricing_tiers: List[PricingTierSchema] = []


class PropertyResponse(BaseModel):
    """Schema for property response."""

    id: str
    name: str
    address_street: Optional[str]
    address_city: Optional[str]
    address_state: Optional[str]
    address_zip: Optional[str]
    property_type: str
    y1_gross_scheduled_revenue: Optional[float]
    y1_total_operating_expenses: Optional[float]
    y1_net_operating_income: Optional[float]
    pricing_tiers: List[PricingTierSchema] = []
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class PropertyListResponse(BaseModel):
    """Response for listing properties."""

    properties: List[PropertyResponse]
    total: int


def property_to_response(prop: Property) -> PropertyResponse:
    """Convert Property model to response schema."""
    return PropertyResponse(
        id=prop.id,
        name=prop.name,
        address_street=prop.address_street,
        address_city=prop.address_city,
        address_state=prop.address_state,
        address_zip=prop.address_zip,
        property_type=prop.property_type or "multifamily",
        y1_gross_scheduled_revenue=prop.y1_gross_scheduled_revenue,
        y1_total_operating_expenses=prop.y1_total_operating_expenses,
        y1_net_operating_income=prop.y1_net_operating_income,
        pricing_tiers=[
            PricingTierSchema.model_validate(tier) for tier in prop.pricing_tiers
        ],
        created_at=prop.created_at.isoformat() if prop.created_at else None,
        updated_at=prop.updated_at.isoformat() if prop.updated_at else None,
    )


def property_baseline(prop: Property) -> Baseline:
    """Baseline financial facts for the underwriting engine."""
    return Baseline(
        gross_scheduled_revenue=prop.y1_gross_scheduled_revenue,
        total_operating_expenses=prop.y1_total_operating_expenses,
        net_operating_income=prop.y1_net_operating_income,
    )


def get_property_or_404(property_id: str, db: Session) -> Property:
    db_property = (
        db.query(Property)
        .filter(Property.id == property_id, Property.is_deleted == False)
        .first()
    )

    if not db_property:
        raise HTTPException(status_code=404, detail="Property not found")

    return db_property


@router.get("/", response_model=PropertyListResponse)
async def list_properties(
    skip: int = 0,
    limit: int = 100,
    property_type: Optional[str] = None,
    db: Session = Depends(get_db),
):
    """List all properties with optional filtering."""
    query = db.query(Property).filter(Property.is_deleted == False)

    if property_type:
        query = query.filter(Property.property_type == property_type)

    total = query.count()
    properties = query.offset(skip).limit(limit).all()

    return PropertyListResponse(
        properties=[property_to_response(p) for p in properties],
        total=total,
    )


@router.post("/", response_model=PropertyResponse, status_code=201)
async def create_property(
    property_data: PropertyCreate,
    db: Session = Depends(get_db),
):
    """Create a property with its baseline financials and pricing tiers."""
    db_property = Property(
        name=property_data.name,
        address_street=property_data.address_street,
        address_city=property_data.address_city,
        address_state=property_data.address_state,
        address_zip=property_data.address_zip,
        property_type=property_data.property_type,
        y1_gross_scheduled_revenue=property_data.y1_gross_scheduled_revenue,
        y1_total_operating_expenses=property_data.y1_total_operating_expenses,
        y1_net_operating_income=property_data.y1_net_operating_income,
        pricing_tiers=[
            PricingTier(
                position=position,
                tier_label=tier.tier_label,
                pricing=tier.pricing,
                terminal_cap_rate=tier.terminal_cap_rate,
            )
            for position, tier in enumerate(property_data.pricing_tiers)
        ],
    )

    db.add(db_property)
    db.commit()
    db.refresh(db_property)

    return property_to_response(db_property)


@router.get("/{property_id}", response_model=PropertyResponse)
async def get_property(
    property_id: str,
    db: Session = Depends(get_db),
):
    """Get a property by ID."""
    return property_to_response(get_property_or_404(property_id, db))


@router.post("/{property_id}/underwriting", response_model=UnderwritingResponse)
async def underwrite_property(
    property_id: str,
    assumptions: Optional[AssumptionInput] = None,
    db: Session = Depends(get_db),
):
    """Run the quick underwriting calculator on a stored property."""
    db_property = get_property_or_404(property_id, db)

    pricing_tiers = [
        PricingGuidance(pricing=t.pricing, terminal_cap_rate=t.terminal_cap_rate)
        for t in db_property.pricing_tiers
    ]

    return run_underwriting(property_baseline(db_property), assumptions, pricing_tiers)
