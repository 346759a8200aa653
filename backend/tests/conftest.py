"""
Shared fixtures: an in-memory database recreated for every test, a TestClient,
and helpers to sign users and the admin in.
"""
import os

# Configuration is read once at import, so it has to be in place first
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "test"
os.environ["USER_JWT_SECRET"] = "test-user-secret"
os.environ["ADMIN_JWT_SECRET"] = "test-admin-secret"
os.environ["ADMIN_EMAIL"] = "admin@mycerti.com"
os.environ["ADMIN_PASSWORD"] = "admin123"
os.environ["PASSWORD_HASH_ROUNDS"] = "4"

import pytest
from fastapi.testclient import TestClient

import mycerti.models  # noqa: F401
from mycerti.database import Base, SessionLocal, engine
from mycerti.main import app

ADMIN_EMAIL = "admin@mycerti.com"
ADMIN_PASSWORD = "admin123"


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def headers():
    """Build an Authorization header for a token."""
    return bearer


@pytest.fixture(autouse=True)
def _schema():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def signup(client):
    """Sign a user up and return (user, token)."""
    def _signup(email="a@b.com", password="secret1", name=None):
        payload = {"email": email, "password": password}
        if name is not None:
            payload["name"] = name
        response = client.post("/auth/signup", json=payload)
        assert response.status_code == 201, response.json()
        body = response.json()
        return body["user"], body["token"]
    return _signup


@pytest.fixture
def user_token(signup):
    _, token = signup()
    return token


@pytest.fixture
def admin_token(client):
    response = client.post("/admin/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert response.status_code == 200, response.json()
    return response.json()["token"]


@pytest.fixture
def create_site(client):
    """Create a site through the user API and return its JSON."""
    def _create_site(token, name="Test", subdomain="test1", plan="free"):
        response = client.post(
            "/sites",
            json={"name": name, "subdomain": subdomain, "plan": plan},
            headers=bearer(token),
        )
        assert response.status_code == 201, response.json()
        return response.json()["site"]
    return _create_site
