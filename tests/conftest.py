import os
import shutil
import tempfile

# Settings are read at import time, so the test database has to be chosen
# before anything under bookreviews is imported.
_DB_DIR = tempfile.mkdtemp(prefix="bookreviews-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_DB_DIR, 'test.db')}"
os.environ["RESET_DB_ON_STARTUP"] = "true"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["GOOGLE_CLIENT_ID"] = ""
os.environ["API_PREFIX"] = ""

import pytest
from fastapi.testclient import TestClient

from bookreviews.core.dependencies import get_identity_provider
from bookreviews.domain.entities import ExternalIdentity
from bookreviews.domain.repositories import IIdentityProvider
from bookreviews.main import app


class FakeIdentityProvider(IIdentityProvider):
    """Accepts only the tokens it was given."""

    def __init__(self, identities: dict[str, ExternalIdentity]):
        self.identities = identities

    async def verify(self, id_token):
        return self.identities.get(id_token)


@pytest.fixture
def identities():
    return {
        "google-token-new": ExternalIdentity(
            email="newcomer@example.com", name="New Comer", picture="https://img.example.com/n.png"
        ),
        "google-token-no-name": ExternalIdentity(email="anon@example.com"),
    }


@pytest.fixture
def client(identities):
    # Entering the client runs the lifespan, which recreates an empty schema
    app.dependency_overrides[get_identity_provider] = lambda: FakeIdentityProvider(identities)
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def register_user(client):
    """Register a user and return ``(user_id, auth_headers)``."""

    def _register(email="reader@example.com", password="secret123", name="Reader"):
        response = client.post(
            "/auth/register", json={"email": email, "password": password, "name": name}
        )
        assert response.status_code == 200, response.text
        data = response.json()
        return data["userId"], {"Authorization": f"Bearer {data['token']}"}

    return _register


@pytest.fixture
def create_book(client):
    """Create a book as the given user and return its JSON."""

    def _create(headers, title="Dune", author="Frank Herbert", **extra):
        payload = {"title": title, "author": author, **extra}
        response = client.post("/books", json=payload, headers=headers)
        assert response.status_code == 201, response.text
        return response.json()

    return _create


def pytest_sessionfinish(session, exitstatus):
    shutil.rmtree(_DB_DIR, ignore_errors=True)
