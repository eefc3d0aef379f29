import pytest
from httpx import AsyncClient

from snapformapi.database import database, theme_table
from snapformapi.seed import SYSTEM_EMAIL, SYSTEM_THEMES, seed_system_user, seed_themes

pytestmark = pytest.mark.anyio


async def test_seed_is_idempotent():
    user_id = await seed_system_user()
    assert await seed_system_user() == user_id

    assert await seed_themes(user_id) == len(SYSTEM_THEMES)
    assert await seed_themes(user_id) == 0

    rows = await database.fetch_all(
        theme_table.select().where(theme_table.c.user_id == user_id).order_by(theme_table.c.id)
    )
    assert [row["name"] for row in rows] == [
        "Default",
        "Dark Mode",
        "Vibrant",
        "Minimal",
        "Nature",
        "Corporate",
    ]


async def test_system_user_cannot_log_in(async_client: AsyncClient):
    await seed_system_user()

    response = await async_client.post("/api/auth/token", json={"email": SYSTEM_EMAIL, "password": ""})

    assert response.status_code == 401


async def test_seeded_themes_are_offered_to_users(async_client: AsyncClient, auth_headers: dict):
    await seed_themes(await seed_system_user())

    response = await async_client.get("/api/themes/default", headers=auth_headers)

    assert [t["name"] for t in response.json()["themes"]][:2] == ["Default", "Dark Mode"]
