import logging
from typing import Annotated, Optional

import sqlalchemy
from fastapi import APIRouter, Depends, HTTPException
from snapformapi.security import get_current_user
from snapformapi.models.base import ErrorOut, Pagination
from snapformapi.models.user import User
from snapformapi.models.form import (
    Form,
    FormActionOut,
    FormIn,
    FormList,
    FormStatus,
    FormUpdateIn,
    ResponseList,
    SubmissionIn,
    SubmissionOut,
)
from snapformapi.database import (
    as_dict,
    database,
    fieldresponse_table,
    form_table,
    formfield_table,
    response_table,
    theme_table,
)
from snapformapi.services.forms import load_form
from snapformapi.services.submission import record_submission


logger = logging.getLogger(__name__)
router = APIRouter()


async def ensure_theme_usable(theme_id: Optional[int], user_id: int):
    if theme_id is None:
        return
    query = theme_table.select().where(
        theme_table.c.id == theme_id,
        sqlalchemy.or_(theme_table.c.user_id == user_id, theme_table.c.is_public.is_(True)),
    )
    if not await database.fetch_one(query):
        raise HTTPException(status_code=400, detail="Theme not found")


async def get_owned_form(form_id: int, current_user: User):
    form = await load_form(form_id, user_id=current_user.id)
    if not form:
        raise HTTPException(status_code=404, detail="Form not found")
    return form


@router.get("", response_model=FormList, status_code=200)
async def list_forms(
    current_user: Annotated[User, Depends(get_current_user)],
    status: Optional[str] = None,
    page: int = 1,
    limit: int = 10,
):
    page = max(page, 1)
    limit = max(limit, 1)
    condition = form_table.c.user_id == current_user.id
    if status in FormStatus.__members__:
        condition = sqlalchemy.and_(condition, form_table.c.status == status)

    count_query = sqlalchemy.select(sqlalchemy.func.count()).select_from(form_table).where(condition)
    total_count = await database.fetch_val(count_query)

    query = (
        form_table.select()
        .where(condition)
        .order_by(form_table.c.updated_at.desc(), form_table.c.id.desc())
        .limit(limit)
        .offset((page - 1) * limit)
    )
    forms = await database.fetch_all(query)

    return {
        "forms": [as_dict(form, form_table) for form in forms],
        "pagination": Pagination.build(total_count, page, limit),
    }


@router.post("", response_model=Form, status_code=201)
async def create_form(form: FormIn, current_user: Annotated[User, Depends(get_current_user)]):
    await ensure_theme_usable(form.theme_id, current_user.id)

    values = form.model_dump(mode="json", exclude={"fields"})
    async with database.transaction():
        form_id = await database.execute(
            form_table.insert().values(**values, user_id=current_user.id, response_count=0)
        )
        for index, f in enumerate(form.fields):
            query_field = formfield_table.insert().values(
                form_id=form_id,
                type=f.type.value,
                label=f.label,
                placeholder=f.placeholder,
                required=f.required,
                options=f.options or [],
                order=index,
            )
            await database.execute(query_field)

    logger.info(f"Form {form_id} created by user {current_user.id}")
    return await load_form(form_id)


@router.get("/{form_id}", response_model=Form, status_code=200)
async def get_form(form_id: int, current_user: Annotated[User, Depends(get_current_user)]):
    return await get_owned_form(form_id, current_user)


@router.put("/{form_id}", response_model=Form, status_code=200)
async def update_form(
    form_id: int,
    form: FormUpdateIn,
    current_user: Annotated[User, Depends(get_current_user)],
):
    existing_form = await get_owned_form(form_id, current_user)
    values = form.model_dump(mode="json", exclude_unset=True, exclude={"fields"})
    if "theme_id" in values:
        await ensure_theme_usable(values["theme_id"], current_user.id)

    async with database.transaction():
        await database.execute(
            form_table.update()
            .where(form_table.c.id == form_id)
            .values(**values, updated_at=sqlalchemy.func.now())
        )

        next_order = len(existing_form["fields"])
        for change in form.fields or []:
            field_values = {
                "type": change.type.value,
                "label": change.label,
                "placeholder": change.placeholder,
                "required": change.required,
                "options": change.options or [],
            }
            if change.order is not None:
                field_values["order"] = change.order
            in_form = sqlalchemy.and_(
                formfield_table.c.id == change.id,
                formfield_table.c.form_id == form_id,
            )

            if change.action == "delete" and change.id is not None:
                await database.execute(
                    fieldresponse_table.delete().where(fieldresponse_table.c.field_id == change.id)
                )
                await database.execute(formfield_table.delete().where(in_form))
            elif change.action == "update" and change.id is not None:
                result = await database.execute(formfield_table.update().where(in_form).values(**field_values))
                logger.debug(f"Updated field {change.id} of form {form_id}: {result}")
            elif change.action in (None, "create"):
                field_values.setdefault("order", next_order)
                next_order += 1
                await database.execute(formfield_table.insert().values(form_id=form_id, **field_values))

    return await load_form(form_id)


@router.delete("/{form_id}", response_model=FormActionOut, status_code=200)
async def delete_form(form_id: int, current_user: Annotated[User, Depends(get_current_user)]):
    await get_owned_form(form_id, current_user)

    response_ids = sqlalchemy.select(response_table.c.id).where(response_table.c.form_id == form_id)
    async with database.transaction():
        await database.execute(
            fieldresponse_table.delete().where(fieldresponse_table.c.response_id.in_(response_ids))
        )
        await database.execute(response_table.delete().where(response_table.c.form_id == form_id))
        await database.execute(formfield_table.delete().where(formfield_table.c.form_id == form_id))
        await database.execute(form_table.delete().where(form_table.c.id == form_id))

    logger.info(f"Form {form_id} deleted by user {current_user.id}")
    return {"success": True, "message": "Form deleted successfully"}


@router.put("/{form_id}/publish", response_model=FormActionOut, status_code=200)
async def publish_form(form_id: int, current_user: Annotated[User, Depends(get_current_user)]):
    await get_owned_form(form_id, current_user)
    query = form_table.update().where(form_table.c.id == form_id).values(
        status=FormStatus.ACTIVE.value,
        updated_at=sqlalchemy.func.now(),
    )
    await database.execute(query)
    return {
        "success": True,
        "message": "Form published successfully",
        "data": await load_form(form_id),
    }


@router.post("/{form_id}/duplicate", response_model=FormActionOut, status_code=200)
async def duplicate_form(form_id: int, current_user: Annotated[User, Depends(get_current_user)]):
    existing_form = await get_owned_form(form_id, current_user)

    copied = {
        column.name: existing_form[column.name]
        for column in form_table.columns
        if column.name not in ("id", "created_at", "updated_at")
    }
    copied.update(
        name=f"{existing_form['name']} (Copy)",
        status=FormStatus.DRAFT.value,
        response_count=0,
    )

    async with database.transaction():
        new_id = await database.execute(form_table.insert().values(**copied))
        for field in existing_form["fields"]:
            field_values = {k: v for k, v in field.items() if k not in ("id", "form_id")}
            await database.execute(formfield_table.insert().values(form_id=new_id, **field_values))

    return {
        "success": True,
        "message": "Form duplicated successfully",
        "data": await load_form(new_id),
    }


@router.get("/{form_id}/responses", response_model=ResponseList, status_code=200)
async def list_responses(
    form_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    page: int = 1,
    limit: int = 10,
):
    await get_owned_form(form_id, current_user)
    page = max(page, 1)
    limit = max(limit, 1)

    count_query = (
        sqlalchemy.select(sqlalchemy.func.count())
        .select_from(response_table)
        .where(response_table.c.form_id == form_id)
    )
    total_count = await database.fetch_val(count_query)

    query = (
        response_table.select()
        .where(response_table.c.form_id == form_id)
        .order_by(response_table.c.created_at.desc(), response_table.c.id.desc())
        .limit(limit)
        .offset((page - 1) * limit)
    )
    responses = await database.fetch_all(query)

    values_by_response = {response.id: {} for response in responses}
    if values_by_response:
        values_query = (
            sqlalchemy.select(
                fieldresponse_table.c.response_id,
                fieldresponse_table.c.value,
                formfield_table.c.id.label("field_id"),
                formfield_table.c.label,
                formfield_table.c.type,
            )
            .select_from(
                fieldresponse_table.join(
                    formfield_table, fieldresponse_table.c.field_id == formfield_table.c.id
                )
            )
            .where(fieldresponse_table.c.response_id.in_(list(values_by_response)))
            .order_by(formfield_table.c.order)
        )
        for row in await database.fetch_all(values_query):
            values_by_response[row.response_id][row.label] = {
                "value": row.value,
                "type": row.type,
                "field_id": row.field_id,
            }

    return {
        "responses": [
            {
                "id": response.id,
                "email": response.email,
                "created_at": response.created_at,
                "completed": response.completed,
                "fields": values_by_response[response.id],
            }
            for response in responses
        ],
        "pagination": Pagination.build(total_count, page, limit),
    }


@router.post(
    "/{form_id}/submit",
    response_model=SubmissionOut,
    status_code=201,
    responses={400: {"model": ErrorOut}, 404: {"model": ErrorOut}},
)
async def submit_form(form_id: int, submission: SubmissionIn):
    response_id = await record_submission(database, form_id, submission)
    return {"response_id": response_id}
