import os

# Must be set before order_routing.database creates its engine
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ENV", "test")
os.environ.setdefault("AUTO_ASSIGN_INTERVAL_SECONDS", "0")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from order_routing.database import Base, get_db
from order_routing.main import app

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

@pytest.fixture
def session_factory():
    Base.metadata.create_all(bind=engine)
    yield TestingSessionLocal
    Base.metadata.drop_all(bind=engine)

@pytest.fixture
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()

@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()

@pytest.fixture
def create_store(client):
    def _create(name, password="secret"):
        response = client.post("/api/v1/stores/", json={"name": name, "password": password})
        assert response.status_code == 201, response.text
        return response.json()
    return _create

@pytest.fixture
def create_order(client):
    def _create(main_store_name=None, **fields):
        payload = {
            "customer_name": fields.pop("customer_name", "Ali Hassan"),
            "customer_phone": "9647700000000",
            "main_store_name": main_store_name,
            "items": fields.pop("items", [{"name": "Lamp", "price": 25000, "quantity": 2}]),
        }
        payload.update(fields)
        response = client.post("/api/v1/orders/", json=payload)
        assert response.status_code == 201, response.text
        return response.json()
    return _create

@pytest.fixture
def enable_auto_assign(client):
    response = client.put("/api/v1/settings/", json={"auto_assign_enabled": True})
    assert response.status_code == 200
    return response.json()
