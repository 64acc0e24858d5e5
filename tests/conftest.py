"""
Pytest configuration and fixtures for API tests.
"""

import pathlib
import sys

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from core.database import get_db
from core.models import Base
from main import app
from modules.categories import models as _categories  # noqa: F401
from modules.events import models as _events  # noqa: F401
from modules.expenses import models as _expenses  # noqa: F401
from modules.orders import models as _orders  # noqa: F401
from modules.portion_controls import models as _portion_controls  # noqa: F401
from modules.products import models as _products  # noqa: F401

# SQLite in-memory database; foreign keys are switched on by core.database's connect listener
engine = create_engine(
    "sqlite:///:memory:",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """Fresh schema and session for each test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    # No context manager: the lifespan would create the configured on-disk database
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_category(client):
    def _make(name: str = "Coffee", description: str = None):
        resp = client.post("/categories", json={"name": name, "description": description})
        assert resp.status_code == 200, resp.text
        return resp.json()

    return _make


@pytest.fixture
def make_product(client):
    def _make(name: str, category_id: int, variants=None, price: float = 120.0, **extra):
        payload = {"name": name, "category_id": category_id, "price": price, "variants": variants or []}
        payload.update(extra)
        resp = client.post("/products", json=payload)
        assert resp.status_code == 200, resp.text
        return resp.json()

    return _make
