import os

# Keep the app's own engine off the filesystem; tests swap in their own below
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import merchant_pos.db as db
import merchant_pos.config as config_mod
from merchant_pos.limiter import limiter
from merchant_pos.main import app
from merchant_pos.models import Base, Dish, InventoryItem

# Test admin credentials
TEST_ADMIN_USERNAME = "testadmin"
TEST_ADMIN_PASSWORD = "testpassword123"

# Inventory ids are assigned in this order by the seed below
RICE_ID, CUP_ID, TEA_ID, WATER_ID = 1, 2, 3, 4
FRIED_RICE_ID, MILK_TEA_ID, WATER_DISH_ID = 1, 2, 3


def seed_data(session):
    """Minimal store: four inventory items and three dishes."""
    session.add_all([
        InventoryItem(name="rice", category="grain", unit="g", stock=1000, min_stock=100, unit_cost=0.01),
        InventoryItem(name="cup", category="packaging", unit="pcs", stock=5, min_stock=10, unit_cost=0.2),
        InventoryItem(name="tea leaves", category="tea", unit="g", stock=500, min_stock=50, unit_cost=0.05),
        InventoryItem(name="tap water", category="utility", unit="ml", stock=-1),
    ])
    session.add_all([
        Dish(
            name="Fried Rice",
            category="mains",
            price=12.0,
            inventory_config={
                "base_inventory": [{"inventory_id": str(RICE_ID), "quantity": 200}],
            },
        ),
        Dish(
            name="Milk Tea",
            category="drinks",
            price=5.0,
            inventory_config={
                "base_inventory": [{"inventory_id": str(TEA_ID), "quantity": 10}],
                "conditional_inventory": [
                    {
                        "inventory_id": str(CUP_ID),
                        "base_quantity": 1,
                        "conditions": [
                            {"option_type": "size", "option_value": "large", "multiplier": 2},
                        ],
                    },
                ],
            },
        ),
        Dish(
            name="Water",
            category="drinks",
            price=0.0,
            inventory_config={
                "base_inventory": [{"inventory_id": str(WATER_ID), "quantity": 300}],
            },
        ),
    ])
    session.commit()


@pytest.fixture
def session_factory():
    """Sessionmaker bound to a fresh in-memory SQLite DB.

    Uses StaticPool so all connections share the same in-memory database.
    """
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    session = TestingSessionLocal()
    seed_data(session)
    session.close()

    yield TestingSessionLocal

    engine.dispose()


@pytest.fixture
def db_session(session_factory):
    """Seeded session for service-level tests."""
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory, monkeypatch):
    """Shared FastAPI TestClient using the seeded in-memory SQLite DB.

    Sets up test admin credentials for authentication.
    """
    monkeypatch.setattr(config_mod, "ADMIN_USERNAME", TEST_ADMIN_USERNAME)
    monkeypatch.setattr(config_mod, "ADMIN_PASSWORD", TEST_ADMIN_PASSWORD)

    # Override FastAPI DB dependency
    def override_get_db():
        db_sess = session_factory()
        try:
            yield db_sess
        finally:
            db_sess.close()

    app.dependency_overrides[db.get_db] = override_get_db
    limiter.reset()

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def admin_auth():
    """Returns HTTP Basic Auth tuple for protected endpoints."""
    return (TEST_ADMIN_USERNAME, TEST_ADMIN_PASSWORD)
