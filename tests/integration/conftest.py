"""Fixtures for API tests: the FastAPI app bound to a per-test in-memory database."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from timekeeper.db.database import get_db
from timekeeper.main import app as fastapi_app


@pytest.fixture
def app(db_engine):
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    fastapi_app.dependency_overrides[get_db] = override_get_db
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def register_and_login(client):
    """Register a user and return its Authorization headers."""

    def _register_and_login(email: str = "ada@timekeeper.dev", password: str = "secret1") -> dict:
        response = client.post("/api/auth/register", json={"email": email, "password": password})
        assert response.status_code == 201, response.text
        response = client.post("/api/auth/login", json={"email": email, "password": password})
        assert response.status_code == 200, response.text
        token = response.json()["data"]["accessToken"]
        return {"Authorization": f"Bearer {token}"}

    return _register_and_login


@pytest.fixture
def auth_headers(register_and_login) -> dict:
    return register_and_login()
