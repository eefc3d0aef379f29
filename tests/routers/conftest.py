from typing import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient

from snapformapi.database import database
from snapformapi.main import app


@pytest.fixture(autouse=True)
async def db() -> AsyncGenerator:
    await database.connect()
    yield
    await database.disconnect()


@pytest.fixture()
async def async_client() -> AsyncGenerator:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


async def register_and_login(async_client: AsyncClient, email: str, password: str = "password1") -> dict:
    response = await async_client.post(
        "/api/auth/register", json={"name": "Test User", "email": email, "password": password}
    )
    user = {"id": response.json()["id"], "email": email, "password": password}
    response = await async_client.post("/api/auth/token", json={"email": email, "password": password})
    user["headers"] = {"Authorization": f"Bearer {response.json()['accessToken']}"}
    return user


@pytest.fixture()
async def registered_user(async_client: AsyncClient) -> dict:
    return await register_and_login(async_client, "test@example.net")


@pytest.fixture()
async def other_user(async_client: AsyncClient) -> dict:
    return await register_and_login(async_client, "other@example.net")


@pytest.fixture()
def auth_headers(registered_user: dict) -> dict:
    return registered_user["headers"]


@pytest.fixture()
def form_body() -> dict:
    return {
        "name": "Customer Survey",
        "description": "Tell us about yourself",
        "fields": [
            {"type": "TEXT", "label": "Full name", "required": True},
            {"type": "CHECKBOX", "label": "Interests", "options": ["Music", "Sports", "Books"]},
            {"type": "NUMBER", "label": "Age"},
        ],
    }


@pytest.fixture()
async def created_form(async_client: AsyncClient, auth_headers: dict, form_body: dict) -> dict:
    response = await async_client.post("/api/forms", json=form_body, headers=auth_headers)
    return response.json()


@pytest.fixture()
async def published_form(async_client: AsyncClient, auth_headers: dict, created_form: dict) -> dict:
    await async_client.put(f"/api/forms/{created_form['id']}/publish", headers=auth_headers)
    return created_form


@pytest.fixture()
def theme_body() -> dict:
    return {
        "name": "Ocean",
        "description": "Blues and greens",
        "primaryColor": "#0ea5e9",
        "secondaryColor": "#0369a1",
        "backgroundColor": "#f0f9ff",
        "accentColor": "#38bdf8",
        "textColor": "#0c4a6e",
        "fontFamily": "Inter, sans-serif",
        "defaultAnimation": "SLIDE",
        "borderRadius": 12,
    }
