from datetime import datetime
from enum import Enum
from typing import Dict, List, Literal, Optional, Union

from pydantic import EmailStr, Field, field_validator, model_validator

from snapformapi.models.base import CamelModel, Pagination
from snapformapi.models.theme import Animation, AnimationSpeed, FormLayout, Theme


class FormStatus(str, Enum):
    DRAFT = "DRAFT"
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class FieldKind(str, Enum):
    TEXT = "TEXT"
    EMAIL = "EMAIL"
    NUMBER = "NUMBER"
    TEXTAREA = "TEXTAREA"
    SELECT = "SELECT"
    RADIO = "RADIO"
    CHECKBOX = "CHECKBOX"
    DATE = "DATE"

    @property
    def has_options(self) -> bool:
        return self in CHOICE_KINDS


CHOICE_KINDS = frozenset({FieldKind.SELECT, FieldKind.RADIO, FieldKind.CHECKBOX})


def _require_options(kind: Optional[FieldKind], options: Optional[List[str]]):
    if kind is not None and kind.has_options:
        if not options or not any(opt.strip() for opt in options):
            raise ValueError(f"{kind.value} fields need at least one option")


class FormField(CamelModel):
    id: Optional[int] = None
    form_id: Optional[int] = None
    type: FieldKind
    label: str
    placeholder: Optional[str] = None
    required: bool = False
    options: List[str] = []
    order: int = 0

    @field_validator("type", mode="before")
    @classmethod
    def upper_type(cls, value):
        return value.upper() if isinstance(value, str) else value

    @field_validator("options", mode="before")
    @classmethod
    def null_options(cls, value):
        return [] if value is None else value


class FormFieldIn(CamelModel):
    type: FieldKind
    label: str = Field(min_length=1)
    placeholder: Optional[str] = None
    required: bool = False
    options: Optional[List[str]] = None

    @field_validator("type", mode="before")
    @classmethod
    def upper_type(cls, value):
        return value.upper() if isinstance(value, str) else value

    @model_validator(mode="after")
    def check_options(self):
        _require_options(self.type, self.options)
        return self


class FormFieldChange(FormFieldIn):
    """One field operation inside a form update."""

    id: Optional[int] = None
    order: Optional[int] = None
    action: Optional[Literal["create", "update", "delete"]] = Field(default=None, alias="_action")

    @model_validator(mode="after")
    def check_options(self):
        if self.action != "delete":
            _require_options(self.type, self.options)
        return self


class FormSettings(CamelModel):
    collect_emails: bool = False
    limit_one_response_per_user: bool = False
    show_progress_bar: bool = False
    shuffle_questions: bool = False
    theme_id: Optional[int] = None
    primary_color: Optional[str] = None
    secondary_color: Optional[str] = None
    background_color: Optional[str] = None
    font_family: Optional[str] = None
    animation: Animation = Animation.FADE
    animation_speed: AnimationSpeed = AnimationSpeed.MEDIUM
    layout: FormLayout = FormLayout.STANDARD
    spacing: str = "normal"
    border_radius: int = 4


class FormIn(FormSettings):
    name: str = Field(min_length=3)
    description: Optional[str] = None
    status: FormStatus = FormStatus.DRAFT
    fields: List[FormFieldIn] = []


class FormUpdateIn(CamelModel):
    name: Optional[str] = Field(default=None, min_length=3)
    description: Optional[str] = None
    status: Optional[FormStatus] = None
    collect_emails: Optional[bool] = None
    limit_one_response_per_user: Optional[bool] = None
    show_progress_bar: Optional[bool] = None
    shuffle_questions: Optional[bool] = None
    theme_id: Optional[int] = None
    primary_color: Optional[str] = None
    secondary_color: Optional[str] = None
    background_color: Optional[str] = None
    font_family: Optional[str] = None
    animation: Optional[Animation] = None
    animation_speed: Optional[AnimationSpeed] = None
    layout: Optional[FormLayout] = None
    spacing: Optional[str] = None
    border_radius: Optional[int] = None
    fields: Optional[List[FormFieldChange]] = None


class Form(FormSettings):
    id: int
    user_id: Optional[int] = None
    name: str
    description: Optional[str] = None
    status: FormStatus = FormStatus.DRAFT
    response_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    fields: List[FormField] = []
    theme: Optional[Theme] = None


class FormSummary(CamelModel):
    id: int
    name: str
    description: Optional[str] = None
    status: FormStatus
    response_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class FormList(CamelModel):
    forms: List[FormSummary]
    pagination: Pagination


class FormBasic(CamelModel):
    id: int
    name: str
    description: Optional[str] = None
    theme: Optional[Theme] = None


class FormActionOut(CamelModel):
    success: bool = True
    message: str
    data: Optional[Form] = None


class FieldAnswer(CamelModel):
    field_id: int
    value: Union[str, List[str]]


class SubmissionIn(CamelModel):
    email: Optional[EmailStr] = None
    responses: List[FieldAnswer] = []


class SubmissionOut(CamelModel):
    success: bool = True
    message: str = "Form submitted successfully"
    response_id: int


class FieldValue(CamelModel):
    value: str
    type: FieldKind
    field_id: int


class ResponseOut(CamelModel):
    id: int
    email: Optional[str] = None
    created_at: Optional[datetime] = None
    completed: bool = False
    fields: Dict[str, FieldValue] = {}


class ResponseList(CamelModel):
    responses: List[ResponseOut]
    pagination: Pagination
