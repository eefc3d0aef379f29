import logging
from typing import Any, Dict, Optional

from snapformapi.database import as_dict, database, form_table, formfield_table, theme_table
from snapformapi.models.form import FormStatus

logger = logging.getLogger(__name__)


async def fetch_fields(form_id: int):
    query = formfield_table.select().where(
        formfield_table.c.form_id == form_id
    ).order_by(formfield_table.c.order, formfield_table.c.id)
    return [as_dict(field, formfield_table) for field in await database.fetch_all(query)]


async def fetch_theme(theme_id: Optional[int]) -> Optional[Dict[str, Any]]:
    if theme_id is None:
        return None
    theme = await database.fetch_one(theme_table.select().where(theme_table.c.id == theme_id))
    return as_dict(theme, theme_table) if theme else None


async def load_form(
    form_id: int,
    user_id: Optional[int] = None,
    active_only: bool = False,
    with_theme: bool = False,
) -> Optional[Dict[str, Any]]:
    """Form row with its ordered fields, or None when out of scope."""
    query = form_table.select().where(form_table.c.id == form_id)
    if user_id is not None:
        query = query.where(form_table.c.user_id == user_id)
    if active_only:
        query = query.where(form_table.c.status == FormStatus.ACTIVE.value)

    logger.debug(query)
    form = await database.fetch_one(query)
    if not form:
        return None

    data = as_dict(form, form_table)
    data["fields"] = await fetch_fields(form_id)
    if with_theme:
        data["theme"] = await fetch_theme(form.theme_id)
    return data
