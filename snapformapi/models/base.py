from typing import Any, Dict, List

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def is_email(value: str) -> bool:
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


class CamelModel(BaseModel):
    """Snake-case attributes, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Pagination(CamelModel):
    total: int
    total_pages: int
    current_page: int
    limit: int
    has_more: bool

    @classmethod
    def build(cls, total: int, page: int, limit: int) -> "Pagination":
        total_pages = (total + limit - 1) // limit if limit else 0
        return cls(
            total=total,
            total_pages=total_pages,
            current_page=page,
            limit=limit,
            has_more=page < total_pages,
        )


class ErrorOut(CamelModel):
    error: Any
    missing_required_fields: List[int] | None = None
    details: List[Dict[str, Any]] | None = None
