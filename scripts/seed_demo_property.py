"""
Seed the database with a demo multifamily property for the underwriting calculator.
"""
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.db.database import get_db_context, init_db
from app.db.models import Property, PricingTier

DEMO_NAME = "Peachtree Station Apartments"


def main():
    init_db()

    with get_db_context() as db:
        existing = db.query(Property).filter(Property.name == DEMO_NAME).first()
        if existing:
            print(f"Property '{DEMO_NAME}' already exists (ID: {existing.id})")
            return

        property = Property(
            name=DEMO_NAME,
            address_street="1000 Peachtree St NE",
            address_city="Atlanta",
            address_state="GA",
            address_zip="30309",
            property_type="multifamily",
            y1_gross_scheduled_revenue=5_000_000,
            y1_total_operating_expenses=2_000_000,
            y1_net_operating_income=3_000_000,
            pricing_tiers=[
                # Broker packages report cap rates as decimals
                PricingTier(
                    position=0,
                    tier_label="Asking Price",
                    pricing=50_000_000,
                    terminal_cap_rate=0.055,
                ),
                PricingTier(
                    position=1,
                    tier_label="Market Assumption",
                    pricing=47_500_000,
                    terminal_cap_rate=0.0575,
                ),
            ],
        )
        db.add(property)
        db.flush()
        print(f"Created property: {property.name} (ID: {property.id})")

    print("\nDemo property created successfully!")


if __name__ == "__main__":
    main()
