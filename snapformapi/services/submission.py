import logging
from typing import List

import databases

from snapformapi.database import (
    fieldresponse_table,
    form_table,
    formfield_table,
    response_table,
)
from snapformapi.errors import APIError
from snapformapi.models.form import FieldAnswer, FormStatus, SubmissionIn

logger = logging.getLogger(__name__)


def stored_value(answer: FieldAnswer) -> str:
    """Lists of selected options are kept as one comma-joined string."""
    if isinstance(answer.value, list):
        return ", ".join(answer.value)
    return answer.value


def missing_required_fields(required_ids: List[int], answers: List[FieldAnswer]) -> List[int]:
    submitted = {answer.field_id for answer in answers}
    return [fid for fid in required_ids if fid not in submitted]


async def record_submission(db: databases.Database, form_id: int, submission: SubmissionIn) -> int:
    """Validate a public submission against its form and store it.

    Returns the new response id. The response row, its field rows and the
    form's response counter are written in one transaction.
    """
    form_query = form_table.select().where(
        form_table.c.id == form_id,
        form_table.c.status == FormStatus.ACTIVE.value,
    )
    form = await db.fetch_one(form_query)
    if not form:
        raise APIError(404, "Form not found or not active")

    if form.collect_emails and not submission.email:
        raise APIError(400, "Email is required for this form")

    fields_query = formfield_table.select().where(formfield_table.c.form_id == form_id)
    fields = await db.fetch_all(fields_query)
    field_ids = {field.id for field in fields}
    required_ids = [field.id for field in fields if field.required]

    missing = missing_required_fields(required_ids, submission.responses)
    if missing:
        raise APIError(
            400,
            "All required fields must be filled",
            missing_required_fields=missing,
        )

    unknown = [a.field_id for a in submission.responses if a.field_id not in field_ids]
    if unknown:
        raise APIError(400, "Unknown fields in submission", unknown_fields=unknown)

    async with db.transaction():
        # duplicate check and insert share one transaction
        if form.limit_one_response_per_user and submission.email:
            existing_query = response_table.select().where(
                response_table.c.form_id == form_id,
                response_table.c.email == submission.email,
            )
            if await db.fetch_one(existing_query):
                logger.info(f"Duplicate response to form {form_id} rejected")
                raise APIError(400, "You have already submitted a response to this form")

        response_id = await db.execute(
            response_table.insert().values(
                form_id=form_id,
                email=submission.email,
                completed=True,
            )
        )
        for answer in submission.responses:
            await db.execute(
                fieldresponse_table.insert().values(
                    response_id=response_id,
                    field_id=answer.field_id,
                    value=stored_value(answer),
                )
            )
        await db.execute(
            form_table.update()
            .where(form_table.c.id == form_id)
            .values(response_count=form_table.c.response_count + 1)
        )

    logger.debug(f"Stored response {response_id} for form {form_id}")
    return response_id
