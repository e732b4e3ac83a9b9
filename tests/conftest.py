"""
Shared test fixtures for the Employee Registry test suite.

Each test gets a fresh app wired to its own in-memory SQLite database
(aiosqlite + StaticPool) and a fake media store.
"""

import os
import sys
from collections.abc import AsyncGenerator
from typing import Any

import pytest

# Ensure project root is importable
ROOT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

TEST_SECRET = "test-secret-key-0123456789abcdef0123456789abcdef"

# Override environment BEFORE importing application modules
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["SECRET_KEY"] = TEST_SECRET
os.environ["CORS_ORIGINS"] = '["*"]'

from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from employee_api.core.config import Settings
from employee_api.core.exceptions import MediaError
from employee_api.core.security import TokenService
from employee_api.db.base import Base
from employee_api.main import create_app

EMPLOYEE: dict[str, Any] = {
    "first_name": "Ada",
    "last_name": "Lovelace",
    "email": "ada.lovelace@acme.com",
    "gender": "Female",
    "designation": "Software Engineer",
    "salary": 85000.0,
    "date_of_joining": "2023-04-01",
    "department": "Engineering",
}


class FakeMediaStore:
    """Records calls instead of talking to Cloudinary."""

    def __init__(self) -> None:
        self.uploaded: list[str] = []
        self.deleted: list[str] = []
        self.fail_upload = False
        self.fail_delete = False

    async def upload(self, image: str) -> str:
        if self.fail_upload:
            raise MediaError("Failed to upload image: media host unavailable")
        self.uploaded.append(image)
        if image.startswith(("http://", "https://")):
            return image
        return f"https://media.test/employee_photos/photo-{len(self.uploaded)}.jpg"

    async def delete(self, url: str) -> None:
        self.deleted.append(url)
        if self.fail_delete:
            raise RuntimeError("media host unavailable")


@pytest.fixture
def settings() -> Settings:
    return Settings(
        DATABASE_URL="sqlite+aiosqlite:///:memory:",
        SECRET_KEY=TEST_SECRET,
        LOG_LEVEL="WARNING",
    )


@pytest.fixture
def media() -> FakeMediaStore:
    return FakeMediaStore()


@pytest.fixture
async def app(settings: Settings, media: FakeMediaStore) -> AsyncGenerator[FastAPI, None]:
    """App with all tables created on its private in-memory database."""
    application = create_app(settings, media=media)
    async with application.state.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield application

    await application.state.engine.dispose()


@pytest.fixture
async def async_client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Return a httpx AsyncClient wired to the app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
async def db_session(app: FastAPI) -> AsyncGenerator[AsyncSession, None]:
    """Return a raw database session for direct queries in tests."""
    async with app.state.session_factory() as session:
        yield session


@pytest.fixture
def tokens(app: FastAPI) -> TokenService:
    return app.state.tokens


@pytest.fixture
def gql(async_client: AsyncClient):
    """POST a GraphQL operation; pass ``token`` or explicit ``headers``."""

    async def _execute(
        query: str,
        variables: dict[str, Any] | None = None,
        token: str | None = None,
        headers: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        headers = dict(headers or {})
        if token is not None:
            headers["Authorization"] = f"Bearer {token}"
        resp = await async_client.post(
            "/graphql",
            json={"query": query, "variables": variables or {}},
            headers=headers,
        )
        assert resp.status_code == 200, resp.text
        return resp.json()

    return _execute


SIGNUP = """
mutation Signup($username: String!, $email: String!, $password: String!) {
  signup(username: $username, email: $email, password: $password) {
    token
    user { id username email created_at updated_at }
  }
}
"""


@pytest.fixture
async def auth_token(gql) -> str:
    """Token for a freshly signed-up user."""
    body = await gql(
        SIGNUP,
        {"username": "hr_admin", "email": "hr@acme.com", "password": "s3cret!"},
    )
    return body["data"]["signup"]["token"]
