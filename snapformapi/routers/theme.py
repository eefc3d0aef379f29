import logging
from typing import Annotated, Optional

import sqlalchemy
from fastapi import APIRouter, Depends, HTTPException, Query
from snapformapi.security import get_current_user, get_optional_user
from snapformapi.models.base import Pagination
from snapformapi.models.theme import Theme, ThemeIn, ThemeList, ThemeUpdateIn
from snapformapi.models.user import User
from snapformapi.database import as_dict, database, form_table, theme_table


logger = logging.getLogger(__name__)
router = APIRouter()


async def get_theme_or_404(theme_id: int):
    theme = await database.fetch_one(theme_table.select().where(theme_table.c.id == theme_id))
    if not theme:
        raise HTTPException(status_code=404, detail="Theme not found")
    return theme


@router.get("", response_model=ThemeList, status_code=200)
async def list_themes(
    current_user: Annotated[User, Depends(get_current_user)],
    include_public: Annotated[bool, Query(alias="includePublic")] = False,
    page: int = 1,
    limit: int = 50,
):
    page = max(page, 1)
    limit = max(limit, 1)
    condition = theme_table.c.user_id == current_user.id
    if include_public:
        condition = sqlalchemy.or_(condition, theme_table.c.is_public.is_(True))

    count_query = sqlalchemy.select(sqlalchemy.func.count()).select_from(theme_table).where(condition)
    total_count = await database.fetch_val(count_query)

    query = (
        theme_table.select()
        .where(condition)
        .order_by(theme_table.c.updated_at.desc(), theme_table.c.id.desc())
        .limit(limit)
        .offset((page - 1) * limit)
    )
    themes = await database.fetch_all(query)
    return {
        "themes": [as_dict(theme, theme_table) for theme in themes],
        "pagination": Pagination.build(total_count, page, limit),
    }


@router.post("", response_model=Theme, status_code=201)
async def create_theme(theme: ThemeIn, current_user: Annotated[User, Depends(get_current_user)]):
    query = theme_table.insert().values(**theme.model_dump(mode="json"), user_id=current_user.id)
    logger.debug(query)
    theme_id = await database.execute(query)
    return as_dict(await get_theme_or_404(theme_id), theme_table)


@router.get("/default", response_model=ThemeList, status_code=200)
async def default_themes(current_user: Annotated[User, Depends(get_current_user)]):
    public_themes = await database.fetch_all(
        theme_table.select().where(theme_table.c.is_public.is_(True)).order_by(theme_table.c.id)
    )
    user_themes = await database.fetch_all(
        theme_table.select()
        .where(theme_table.c.user_id == current_user.id, theme_table.c.is_public.is_(False))
        .order_by(theme_table.c.id)
    )
    return {"themes": [as_dict(theme, theme_table) for theme in [*public_themes, *user_themes]]}


@router.get("/{theme_id}", response_model=Theme, status_code=200)
async def get_theme(theme_id: int, current_user: Annotated[Optional[User], Depends(get_optional_user)]):
    theme = await get_theme_or_404(theme_id)
    if not theme.is_public and (current_user is None or theme.user_id != current_user.id):
        raise HTTPException(status_code=403, detail="Unauthorized access to theme")
    return as_dict(theme, theme_table)


@router.put("/{theme_id}", response_model=Theme, status_code=200)
async def update_theme(
    theme_id: int,
    theme: ThemeUpdateIn,
    current_user: Annotated[User, Depends(get_current_user)],
):
    existing_theme = await get_theme_or_404(theme_id)
    if existing_theme.user_id != current_user.id:
        raise HTTPException(status_code=403, detail="You don't have permission to update this theme")

    values = theme.model_dump(mode="json", exclude_unset=True)
    query = theme_table.update().where(theme_table.c.id == theme_id).values(
        **values, updated_at=sqlalchemy.func.now()
    )
    logger.debug(query)
    await database.execute(query)
    return as_dict(await get_theme_or_404(theme_id), theme_table)


@router.delete("/{theme_id}", status_code=200)
async def delete_theme(theme_id: int, current_user: Annotated[User, Depends(get_current_user)]):
    existing_theme = await get_theme_or_404(theme_id)
    if existing_theme.user_id != current_user.id:
        raise HTTPException(status_code=403, detail="You don't have permission to delete this theme")

    count_query = sqlalchemy.select(sqlalchemy.func.count()).select_from(form_table).where(
        form_table.c.theme_id == theme_id
    )
    if await database.fetch_val(count_query) > 0:
        raise HTTPException(
            status_code=409,
            detail="This theme is currently in use by forms. Update the forms to use another theme before deleting.",
        )

    await database.execute(theme_table.delete().where(theme_table.c.id == theme_id))
    return {"success": "Theme deleted successfully"}
