"""
Shared pytest fixtures for all test modules.

Uses an in-memory SQLite database (StaticPool) so every test
function gets a clean, isolated orders table — no disk I/O, no state leakage.
The gateway and fulfillment collaborators are replaced with AsyncMocks.
"""
import pytest
from unittest.mock import AsyncMock
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from typing import Optional

from app.config import Settings, get_settings
from app.database import Base, get_db
from app.processors.sslcommerz import get_gateway_client
from app.services.fulfillment import get_fulfillment_hooks
from app import models


# ---------------------------------------------------------------------------
# In-memory database engine shared across all fixtures in a test session.
# StaticPool forces all SQLAlchemy connections to reuse the same underlying
# sqlite3 connection, which is required for in-memory SQLite.
# ---------------------------------------------------------------------------
TEST_ENGINE = create_engine(
    "sqlite:///:memory:",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=TEST_ENGINE)

GATEWAY_URL = "https://securepay.sslcommerz.com/gwprocess/v4/gw.php?Q=pay&SESSIONKEY=ABC123"
SANDBOX_URL = "https://sandbox.sslcommerz.com/gwprocess/v4/gw.php?Q=pay&SESSIONKEY=ABC123"


def make_settings(**overrides) -> Settings:
    values = {
        "frontend_url": "https://shop.example.com",
        "backend_url": "https://pay.example.com",
        "sslc_store_id": "shopantik01",
        "sslc_store_password": "s3cret",
        "is_live": False,
        "log_format": "text",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def mock_gateway(session_response=None, validation_response=None):
    """Return an AsyncMock standing in for the SSLCommerz client."""
    m = AsyncMock()
    m.initiate = AsyncMock(return_value=session_response or {
        "status": "SUCCESS",
        "GatewayPageURL": GATEWAY_URL,
        "sessionkey": "ABC123",
    })
    m.validate = AsyncMock(return_value=validation_response or {
        "status": "VALID",
        "val_id": "VAL_1",
    })
    return m


def mock_hooks():
    m = AsyncMock()
    m.send_order_confirmation = AsyncMock(return_value=None)
    m.update_inventory = AsyncMock(return_value=None)
    return m


@pytest.fixture(autouse=True)
def reset_db():
    """Drop and recreate all tables before each test for full isolation."""
    Base.metadata.drop_all(bind=TEST_ENGINE)
    Base.metadata.create_all(bind=TEST_ENGINE)
    yield
    Base.metadata.drop_all(bind=TEST_ENGINE)


@pytest.fixture
def db(reset_db):
    """Yield a SQLAlchemy session backed by the in-memory test database."""
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def gateway():
    return mock_gateway()


@pytest.fixture
def hooks():
    return mock_hooks()


@pytest.fixture
def client(db, settings, gateway, hooks):
    """
    FastAPI TestClient with the DB, settings, gateway and fulfillment
    dependencies overridden.  The TestClient is NOT used as a context
    manager so the lifespan hook (logging setup, on-disk tables) is skipped.
    """
    from app.main import app

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_gateway_client] = lambda: gateway
    app.dependency_overrides[get_fulfillment_hooks] = lambda: hooks
    yield TestClient(app)
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Helper — not a fixture — so any test file can import and call it directly.
# ---------------------------------------------------------------------------
def make_order(
    db,
    order_id: int,
    status: str = "pending",
    payment_status: str = "pending",
    total: float = 2000.0,
    customer_email: Optional[str] = "rahim@example.com",
    customer_name: Optional[str] = "Rahim Uddin",
    items: Optional[list] = None,
    validation_id: Optional[str] = None,
) -> models.Order:
    order = models.Order(
        id=order_id,
        status=status,
        payment_status=payment_status,
        total=total,
        customer_email=customer_email,
        customer_name=customer_name,
        items=items if items is not None else [{"book_id": 7, "name": "Gitanjali", "quantity": 1}],
        validation_id=validation_id,
    )
    db.add(order)
    db.commit()
    db.refresh(order)
    return order
