"""
Shared fixtures: a throwaway SQLite database per test, a started
application context, and a TestClient over the full app.
"""

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from config.settings import Settings
from core.context import AppContext
from main import create_app


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        jwt_secret="test-secret",
        bcrypt_rounds=4,
        auth_header="x-auth",
    )


@pytest_asyncio.fixture
async def context(settings):
    ctx = AppContext.build(settings)
    await ctx.startup()
    yield ctx
    await ctx.shutdown()


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as test_client:
        yield test_client


def register(client: TestClient, email: str, password: str = "password1"):
    """Register through the API and return (response, token)."""
    res = client.post("/users", json={"email": email, "password": password})
    return res, res.headers.get("x-auth")
