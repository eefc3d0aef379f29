"""
Seed the system user and the public themes every account can pick from.

    python -m snapformapi.seed
"""
import asyncio
import logging

from snapformapi.database import database, theme_table, user_table
from snapformapi.logging_conf import configure_logging

logger = logging.getLogger(__name__)

SYSTEM_EMAIL = "system@snapform.com"

SYSTEM_THEMES = [
    {
        "name": "Default",
        "description": "A clean, professional theme with a blue accent",
        "primary_color": "#0070f3",
        "secondary_color": "#0070f3",
        "background_color": "#ffffff",
        "accent_color": "#0070f3",
        "text_color": "#333333",
        "font_family": "Inter, sans-serif",
        "default_animation": "FADE",
        "default_layout": "standard",
        "default_spacing": "normal",
        "border_radius": 8,
    },
    {
        "name": "Dark Mode",
        "description": "A sleek dark theme that reduces eye strain",
        "primary_color": "#7c3aed",
        "secondary_color": "#4c1d95",
        "background_color": "#1f2937",
        "accent_color": "#8b5cf6",
        "text_color": "#f9fafb",
        "font_family": "Inter, sans-serif",
        "default_animation": "FADE",
        "default_layout": "standard",
        "default_spacing": "normal",
        "border_radius": 8,
    },
    {
        "name": "Vibrant",
        "description": "A bold, colorful theme with vibrant accents",
        "primary_color": "#f43f5e",
        "secondary_color": "#db2777",
        "background_color": "#fffbeb",
        "accent_color": "#fb923c",
        "text_color": "#1e293b",
        "font_family": "Poppins, sans-serif",
        "default_animation": "SLIDE",
        "default_layout": "card",
        "default_spacing": "normal",
        "border_radius": 12,
    },
    {
        "name": "Minimal",
        "description": "A minimalist theme with subtle design elements",
        "primary_color": "#475569",
        "secondary_color": "#334155",
        "background_color": "#f8fafc",
        "accent_color": "#94a3b8",
        "text_color": "#1e293b",
        "font_family": "DM Sans, sans-serif",
        "default_animation": "NONE",
        "default_layout": "standard",
        "default_spacing": "compact",
        "border_radius": 4,
    },
    {
        "name": "Nature",
        "description": "A calming theme inspired by natural elements",
        "primary_color": "#059669",
        "secondary_color": "#047857",
        "background_color": "#f0fdf4",
        "accent_color": "#10b981",
        "text_color": "#1e293b",
        "font_family": "Source Sans Pro, sans-serif",
        "default_animation": "FADE",
        "default_layout": "standard",
        "default_spacing": "relaxed",
        "border_radius": 8,
    },
    {
        "name": "Corporate",
        "description": "A professional theme ideal for business forms",
        "primary_color": "#1e40af",
        "secondary_color": "#1e3a8a",
        "background_color": "#ffffff",
        "accent_color": "#3b82f6",
        "text_color": "#0f172a",
        "font_family": "Roboto, sans-serif",
        "default_animation": "FADE",
        "default_layout": "standard",
        "default_spacing": "normal",
        "border_radius": 4,
    },
]


async def seed_system_user() -> int:
    existing = await database.fetch_one(user_table.select().where(user_table.c.email == SYSTEM_EMAIL))
    if existing:
        logger.info(f"System user already exists with ID {existing['id']}")
        return existing["id"]

    # empty hash: nobody can log in as the system user
    user_id = await database.execute(
        user_table.insert().values(email=SYSTEM_EMAIL, name="System", password_hash="")
    )
    logger.info(f"Created system user with ID {user_id}")
    return user_id


async def seed_themes(system_user_id: int) -> int:
    created = 0
    for theme in SYSTEM_THEMES:
        query = theme_table.select().where(
            theme_table.c.user_id == system_user_id, theme_table.c.name == theme["name"]
        )
        if await database.fetch_one(query):
            logger.debug(f"Theme {theme['name']} already seeded")
            continue
        await database.execute(theme_table.insert().values(user_id=system_user_id, is_public=True, **theme))
        created += 1
    logger.info(f"Seeded {created} system themes")
    return created


async def seed():
    await database.connect()
    try:
        user_id = await seed_system_user()
        await seed_themes(user_id)
    finally:
        await database.disconnect()


if __name__ == "__main__":
    configure_logging()
    asyncio.run(seed())
