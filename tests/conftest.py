"""Shared fixtures: an app wired to a private in-memory SQLite database."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool

from config import Settings
from database import build_engine, build_session_factory
from main import create_app
from models import inventory as inventory_models

ADMIN_KEY = "test-admin-key"


@pytest.fixture
def engine():
    engine = build_engine("sqlite://", poolclass=StaticPool)
    yield engine
    engine.dispose()


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        ADMIN_KEY=ADMIN_KEY,
        DATABASE_URL="sqlite://",
        WEB_DIST=str(tmp_path / "dist"),
        SEED_DEFAULTS=True,
    )


@pytest.fixture
def client(settings: Settings, engine):
    with TestClient(create_app(settings, engine)) as test_client:
        yield test_client


@pytest.fixture
def auth() -> dict:
    return {"x-key": ADMIN_KEY}


@pytest.fixture
def db(engine):
    inventory_models.Base.metadata.create_all(bind=engine)
    session = build_session_factory(engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_item(client: TestClient, auth: dict):
    """Create an item through the API and return its JSON."""

    def _make_item(**overrides) -> dict:
        payload = {
            "item": "Chicken Breast",
            "supplier": "Bidfood",
            "category": "Meats",
            "quantity": 10,
            "price": 2.50,
        }
        payload.update(overrides)
        response = client.post("/api/items", json=payload, headers=auth)
        assert response.status_code == 201, response.text
        return response.json()

    return _make_item
