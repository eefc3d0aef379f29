import logging
import random
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, Sequence

from snapformapi.client import SUBMIT_FALLBACK_MESSAGE, SubmissionRejected
from snapformapi.models.form import FieldKind, Form, FormField
from snapformapi.renderer.schema import EMAIL_KEY, FormSchema, build_schema, field_key
from snapformapi.renderer.steps import StepNavigator, is_step_layout, plan_steps
from snapformapi.renderer.theming import Presentation, resolve_presentation

logger = logging.getLogger(__name__)


class Submitter(Protocol):
    async def submit_response(self, form_id: int, payload: Dict[str, Any]) -> Dict[str, Any]:
        ...


def order_fields(fields: Sequence[FormField], shuffle: bool, rng: Optional[random.Random] = None) -> List[FormField]:
    ordered = list(fields)
    if shuffle:
        (rng or random).shuffle(ordered)
    else:
        ordered.sort(key=lambda f: f.order)
    return ordered


def is_filled(value: Any) -> bool:
    if isinstance(value, (list, tuple)):
        return len(value) > 0
    return bool(value)


def compute_progress(
    keys: Sequence[str],
    values: Dict[str, Any],
    step_layout: bool = False,
    current_step: int = 0,
    total_steps: int = 0,
) -> float:
    if step_layout:
        if total_steps <= 0:
            return 0.0
        return (current_step + 1) / total_steps * 100
    if not keys:
        return 0.0
    filled = sum(1 for key in keys if is_filled(values.get(key)))
    return filled / len(keys) * 100


def build_payload(schema: FormSchema, values: Dict[str, Any]) -> Dict[str, Any]:
    """Request body for the submit endpoint.

    The e-mail travels beside the answers, never inside them. Checkbox
    selections are sent as lists; the server joins them on write.
    """
    responses = [
        {"fieldId": rule.field_id, "value": values.get(key, [] if rule.kind is FieldKind.CHECKBOX else "")}
        for key, rule in schema.rules.items()
        if key != EMAIL_KEY
    ]
    payload: Dict[str, Any] = {"responses": responses}
    if schema.collects_email:
        payload["email"] = values.get(EMAIL_KEY, "")
    return payload


@dataclass
class StepOutcome:
    advanced: bool = False
    submitted: bool = False
    errors: Dict[str, str] = field(default_factory=dict)


class FormSession:
    def __init__(self, form: Form, rng: Optional[random.Random] = None):
        self.form = form
        self.fields = order_fields(form.fields, form.shuffle_questions, rng)
        self.schema = build_schema(self.fields, form.collect_emails)
        self.values: Dict[str, Any] = self.schema.defaults()
        self.errors: Dict[str, str] = {}
        self.navigator = StepNavigator(plan_steps(self.fields, form.layout, form.collect_emails))
        self.presentation: Presentation = resolve_presentation(form, form.theme)
        self.submitting = False
        self.error_message: Optional[str] = None
        self.response_id: Optional[int] = None

    @property
    def is_step_layout(self) -> bool:
        return is_step_layout(self.form.layout)

    @property
    def submitted(self) -> bool:
        return self.response_id is not None

    @property
    def confirmation_path(self) -> str:
        return f"/submission/{self.form.id}/thank-you"

    @property
    def progress(self) -> float:
        return compute_progress(
            self.schema.keys,
            self.values,
            step_layout=self.is_step_layout,
            current_step=self.navigator.current,
            total_steps=self.navigator.total_steps,
        )

    def visible_fields(self) -> List[FormField]:
        return self.navigator.current_step

    def reconfigure(self, layout=None, collect_emails: Optional[bool] = None):
        changes = {}
        if layout is not None:
            changes["layout"] = layout
        if collect_emails is not None:
            changes["collect_emails"] = collect_emails
        self.form = self.form.model_copy(update=changes)

        self.schema = build_schema(self.fields, self.form.collect_emails)
        defaults = self.schema.defaults()
        self.values = {key: self.values.get(key, default) for key, default in defaults.items()}
        self.navigator.replan(plan_steps(self.fields, self.form.layout, self.form.collect_emails))

    def set_value(self, key: str, value: Any):
        if key not in self.schema.rules:
            raise KeyError(key)
        self.values[key] = value
        self.errors.pop(key, None)

    def toggle_option(self, key: str, option: str, checked: bool):
        selected = list(self.values.get(key) or [])
        if checked and option not in selected:
            selected.append(option)
        elif not checked:
            selected = [v for v in selected if v != option]
        self.set_value(key, selected)

    def back(self) -> bool:
        return self.navigator.back()

    async def next(self, submitter: Submitter) -> StepOutcome:
        errors = self.schema.validate(self.values, self.navigator.current_keys())
        if errors:
            self.errors.update(errors)
            return StepOutcome(errors=errors)
        if self.navigator.advance():
            return StepOutcome(advanced=True)
        submitted = await self.submit(submitter)
        return StepOutcome(submitted=submitted, errors=dict(self.errors))

    async def submit(self, submitter: Submitter) -> bool:
        """Validate everything and send it; values survive a failure."""
        self.errors = self.schema.validate(self.values)
        if self.errors:
            return False

        self.submitting = True
        self.error_message = None
        try:
            result = await submitter.submit_response(self.form.id, build_payload(self.schema, self.values))
        except SubmissionRejected as e:
            logger.warning(f"Submission to form {self.form.id} rejected: {e.message}")
            self.error_message = e.message or SUBMIT_FALLBACK_MESSAGE
            for field_id in e.missing_fields:
                rule = self.schema.rules.get(field_key(field_id))
                if rule:
                    self.errors[rule.key] = f"{rule.label} is required"
            return False
        finally:
            self.submitting = False

        if not result.get("success"):
            self.error_message = result.get("error") or SUBMIT_FALLBACK_MESSAGE
            return False
        self.response_id = result.get("responseId")
        return True
