"""
Pytest configuration and shared fixtures.
"""

import pytest
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.db.database import get_db
from app.db.models import Base
from app.calculations.inputs import Assumptions, Baseline

# Create a shared test database engine
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"
test_engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


def override_get_db():
    """Override database dependency for testing."""
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


# Override the dependency globally for all tests
app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def setup_database():
    """Create tables before each test and drop after."""
    Base.metadata.create_all(bind=test_engine)
    yield
    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def db_session():
    """Create database session for test setup."""
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def baseline():
    """Year-1 financials: $5M revenue, $2M expenses, $3M NOI."""
    return Baseline(
        gross_scheduled_revenue=5_000_000,
        total_operating_expenses=2_000_000,
        net_operating_income=3_000_000,
    )


@pytest.fixture
def assumptions():
    """$50M purchase, 65% LTV at 6.5%, 5-year hold exiting at a 5.5% cap."""
    return Assumptions(
        purchase_price=50_000_000,
        annual_rent_growth_pct=3.0,
        annual_expense_growth_pct=2.5,
        exit_cap_rate_pct=5.5,
        hold_period_years=5,
        loan_to_value_pct=65.0,
        interest_rate_pct=6.5,
    )
