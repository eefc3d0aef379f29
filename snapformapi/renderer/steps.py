import logging
from typing import List, Sequence

from snapformapi.models.form import FieldKind, FormField
from snapformapi.models.theme import FormLayout
from snapformapi.renderer.schema import EMAIL_KEY, field_key

logger = logging.getLogger(__name__)

Step = List[FormField]

EMAIL_STEP_FIELD = FormField(
    id=None,
    type=FieldKind.EMAIL,
    label="Email address",
    placeholder="you@example.com",
    required=True,
    order=-1,
)


def is_step_layout(layout) -> bool:
    return str(getattr(layout, "value", layout)).lower() == FormLayout.STEP.value


def plan_steps(fields: Sequence[FormField], layout, collect_emails: bool) -> List[Step]:
    """Group fields into the screens of the filling flow.

    Standard and card layouts render everything on one screen. The step
    layout shows one field per screen, with the e-mail question first when
    the form collects e-mails.
    """
    if not fields:
        return []

    email_step = [EMAIL_STEP_FIELD] if collect_emails else []
    if not is_step_layout(layout):
        return [email_step + list(fields)]

    steps: List[Step] = []
    if email_step:
        steps.append(email_step)
    steps.extend([f] for f in fields)
    return steps


def step_keys(step: Step) -> List[str]:
    return [EMAIL_KEY if f is EMAIL_STEP_FIELD else field_key(f.id) for f in step]


class StepNavigator:
    """Zero-based position within a list of steps."""

    def __init__(self, steps: List[Step]):
        self.steps = steps
        self.current = 0

    @property
    def total_steps(self) -> int:
        return len(self.steps)

    @property
    def is_last(self) -> bool:
        return self.current >= self.total_steps - 1

    @property
    def current_step(self) -> Step:
        if not self.steps:
            return []
        return self.steps[self.current]

    def current_keys(self) -> List[str]:
        return step_keys(self.current_step)

    def replan(self, steps: List[Step]):
        self.steps = steps
        self.current = min(self.current, max(self.total_steps - 1, 0))
        logger.debug(f"Replanned into {self.total_steps} steps, at step {self.current}")

    def advance(self) -> bool:
        if self.is_last:
            return False
        self.current += 1
        return True

    def back(self) -> bool:
        if self.current == 0:
            return False
        self.current -= 1
        return True
