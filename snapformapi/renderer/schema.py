import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

from snapformapi.models.base import is_email
from snapformapi.models.form import FieldKind, FormField

EMAIL_KEY = "email"
FIELD_PREFIX = "field_"


def field_key(field_id: Any) -> str:
    return f"{FIELD_PREFIX}{field_id}"


def is_number(text: str) -> bool:
    """Whether ``text`` parses as a finite number."""
    stripped = text.strip()
    if not stripped:
        # blank input coerces to zero
        return True
    if "_" in stripped:
        return False
    try:
        return math.isfinite(float(stripped))
    except ValueError:
        return False


@dataclass(frozen=True)
class Valid:
    key: str
    value: Any


@dataclass(frozen=True)
class Invalid:
    key: str
    message: str


FieldCheck = Union[Valid, Invalid]


@dataclass(frozen=True)
class FieldRule:
    key: str
    kind: FieldKind
    label: str
    required: bool
    field_id: Optional[int] = None

    def validate(self, value: Any) -> FieldCheck:
        if self.kind is FieldKind.CHECKBOX:
            return self._check_selection(value)

        if value is None:
            value = ""
        if not isinstance(value, str):
            return Invalid(self.key, f"{self.label} must be text")

        if self.key == EMAIL_KEY:
            if not is_email(value):
                return Invalid(self.key, "A valid email address is required")
            return Valid(self.key, value)

        if value == "":
            if self.required:
                return Invalid(self.key, f"{self.label} is required")
            return Valid(self.key, value)

        if self.kind is FieldKind.EMAIL and not is_email(value):
            return Invalid(self.key, f"Please enter a valid email for {self.label}")
        if self.kind is FieldKind.NUMBER and not is_number(value):
            return Invalid(self.key, f"{self.label} must be a number")
        return Valid(self.key, value)

    def _check_selection(self, value: Any) -> FieldCheck:
        # no selection is always accepted, even for required fields
        if value is None:
            return Valid(self.key, [])
        if not isinstance(value, (list, tuple)) or not all(isinstance(v, str) for v in value):
            return Invalid(self.key, f"{self.label} must be a list of options")
        return Valid(self.key, list(value))


@dataclass(frozen=True)
class FormSchema:
    rules: Dict[str, FieldRule] = field(default_factory=dict)

    @property
    def keys(self) -> List[str]:
        return list(self.rules)

    @property
    def collects_email(self) -> bool:
        return EMAIL_KEY in self.rules

    def defaults(self) -> Dict[str, Any]:
        """Fresh initial values: ``""`` per key, ``[]`` for checkbox groups."""
        return {
            key: [] if rule.kind is FieldKind.CHECKBOX else ""
            for key, rule in self.rules.items()
        }

    def check(self, values: Dict[str, Any], keys: Optional[Iterable[str]] = None) -> List[FieldCheck]:
        selected = self.keys if keys is None else [k for k in keys if k in self.rules]
        return [self.rules[key].validate(values.get(key)) for key in selected]

    def validate(self, values: Dict[str, Any], keys: Optional[Iterable[str]] = None) -> Dict[str, str]:
        """Error message per failing key; empty when everything passes."""
        return {
            result.key: result.message
            for result in self.check(values, keys)
            if isinstance(result, Invalid)
        }


def build_schema(fields: Sequence[FormField], collect_emails: bool) -> FormSchema:
    rules: Dict[str, FieldRule] = {}
    if collect_emails:
        rules[EMAIL_KEY] = FieldRule(
            key=EMAIL_KEY, kind=FieldKind.EMAIL, label="Email address", required=True
        )
    for f in fields:
        key = field_key(f.id)
        rules[key] = FieldRule(
            key=key,
            kind=FieldKind(f.type),
            label=f.label,
            required=f.required,
            field_id=f.id,
        )
    return FormSchema(rules=rules)
