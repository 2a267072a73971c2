"""Shared test fixtures."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient
from datetime import date
from decimal import Decimal
import uuid

from varisankya.database import Base, get_db
from varisankya.main import app
from varisankya.models.subscription import Subscription, PaymentHistoryEntry, BillingCycle


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh database for each test using in-memory SQLite."""
    # Use StaticPool to ensure all connections use the same in-memory database
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Create all tables
    Base.metadata.create_all(bind=engine)

    # Create session
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture(scope="function")
def client(db_session):
    """Create a test client with database override."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def make_subscription(**overrides) -> Subscription:
    """Unsaved subscription with sensible defaults."""
    fields = dict(
        id=str(uuid.uuid4()),
        name="Netflix",
        cost=Decimal("15.99"),
        currency="USD",
        billing_cycle=BillingCycle.monthly.value,
        custom_days=None,
        custom_months=None,
        next_due_date=date(2024, 6, 10),
        category="Streaming",
        notes="",
        active=True,
    )
    fields.update(overrides)
    return Subscription(**fields)


@pytest.fixture
def sample_subscription(db_session):
    """Create a sample monthly subscription due 2024-06-10."""
    subscription = make_subscription()
    db_session.add(subscription)
    db_session.commit()
    db_session.refresh(subscription)
    return subscription


@pytest.fixture
def undated_subscription(db_session):
    """Create a subscription with no due date set."""
    subscription = make_subscription(name="Gym", cost=Decimal("40.00"), next_due_date=None, category="Health")
    db_session.add(subscription)
    db_session.commit()
    db_session.refresh(subscription)
    return subscription


@pytest.fixture
def subscription_with_history(db_session, sample_subscription):
    """Sample subscription with two past payments."""
    for i, paid in enumerate([date(2024, 4, 10), date(2024, 5, 10)]):
        sample_subscription.payment_history.append(PaymentHistoryEntry(
            id=f"hist-{i}",
            position=i,
            date=paid,
            cost=Decimal("15.99"),
        ))
    db_session.commit()
    db_session.refresh(sample_subscription)
    return sample_subscription
