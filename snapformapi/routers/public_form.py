from fastapi import APIRouter, HTTPException
from snapformapi.models.form import Form, FormBasic
from snapformapi.services.forms import load_form

router = APIRouter()


@router.get("/{form_id}", response_model=Form, response_model_exclude={"user_id"}, status_code=200)
async def get_public_form(form_id: int):
    form = await load_form(form_id, active_only=True, with_theme=True)
    if not form:
        raise HTTPException(status_code=404, detail="Form not found or not available")
    return form


@router.get("/{form_id}/basic", response_model=FormBasic, status_code=200)
async def get_form_basic(form_id: int):
    form = await load_form(form_id, with_theme=True)
    if not form:
        raise HTTPException(status_code=404, detail="Form not found")
    return form
