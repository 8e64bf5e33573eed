from typing import Optional

import httpx
import pytest
from asgi_lifespan import LifespanManager

from wardrobe_api.core.config import Settings
from wardrobe_api.main import create_app
from wardrobe_api.remote import InMemoryRemote

API_BASE = "http://test"
ADMIN_SECRET = "test-admin-secret"
PASSWORD = "secret123"


@pytest.fixture
def settings():
    return Settings(_env_file=None, REMOTE_BACKEND="memory", ADMIN_SECRET=ADMIN_SECRET, LOG_LEVEL="WARNING")


@pytest.fixture
def remote():
    return InMemoryRemote()


@pytest.fixture
async def client(settings, remote):
    app = create_app(settings, remote)
    async with LifespanManager(app):
        async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url=API_BASE) as ac:
            yield ac


@pytest.fixture
def admin_headers():
    return {"x-admin-secret": ADMIN_SECRET}


@pytest.fixture
def register_user(client):
    """Sign up and log in a user; returns its id, token and auth headers."""

    async def _register(email: str, password: str = PASSWORD, username: Optional[str] = None) -> dict:
        body = {"email": email, "password": password}
        if username:
            body["additional_metadata"] = {"username": username}
        resp = await client.post("/auth/v1/signup", json=body)
        assert resp.status_code == 201, resp.text
        login = await client.post("/auth/v1/login", json={"email": email, "password": password})
        assert login.status_code == 200, login.text
        data = login.json()
        return {
            "id": data["profile"]["id"],
            "profile": data["profile"],
            "token": data["access_token"],
            "headers": {"Authorization": f"Bearer {data['access_token']}"},
        }

    return _register


@pytest.fixture
def seed_taxonomy(client, admin_headers):
    """Create top/bottom (required) and shoes categories plus a casual style."""

    async def _seed() -> dict:
        ids = {}
        for name, display, required in (
            ("top", "Top", True),
            ("bottom", "Bottom", True),
            ("shoes", "Shoes", False),
        ):
            resp = await client.post(
                "/admin/item_categories",
                json={"name": name, "display_name": display, "is_required": required},
                headers=admin_headers,
            )
            assert resp.status_code == 201, resp.text
            ids[name] = resp.json()["id"]
        resp = await client.post(
            "/admin/styles", json={"name": "casual", "display_name": "Casual"}, headers=admin_headers
        )
        assert resp.status_code == 201, resp.text
        ids["casual"] = resp.json()["id"]
        return ids

    return _seed
