import random

import pytest

from snapformapi.client import SubmissionRejected
from snapformapi.models.form import Form, FormField
from snapformapi.renderer.flow import (
    SUBMIT_FALLBACK_MESSAGE,
    FormSession,
    build_payload,
    compute_progress,
    order_fields,
)
from snapformapi.renderer.schema import build_schema


class FakeSubmitter:
    def __init__(self, result=None, error=None):
        self.result = result if result is not None else {"success": True, "responseId": 77}
        self.error = error
        self.calls = []

    async def submit_response(self, form_id, payload):
        self.calls.append((form_id, payload))
        if self.error:
            raise self.error
        return self.result


def make_form(layout="standard", collect_emails=False, shuffle=False):
    fields = [
        FormField(id=11, type="TEXT", label="Name", required=True, order=0),
        FormField(id=12, type="EMAIL", label="Work email", order=1),
        FormField(id=13, type="CHECKBOX", label="Interests", options=["Music", "Books"], order=2),
        FormField(id=14, type="NUMBER", label="Age", order=3),
    ]
    return Form(
        id=5,
        name="Survey",
        status="ACTIVE",
        layout=layout,
        collect_emails=collect_emails,
        shuffle_questions=shuffle,
        fields=fields,
    )


def test_order_fields_by_order():
    form = make_form()
    reversed_fields = list(reversed(form.fields))

    assert [f.id for f in order_fields(reversed_fields, shuffle=False)] == [11, 12, 13, 14]


def test_order_fields_shuffled_is_a_permutation():
    form = make_form()

    shuffled = order_fields(form.fields, shuffle=True, rng=random.Random(3))

    assert sorted(f.id for f in shuffled) == [11, 12, 13, 14]
    assert shuffled == order_fields(form.fields, shuffle=True, rng=random.Random(3))


def test_progress_counts_filled_fields():
    values = {"field_11": "Ada", "field_12": "", "field_13": ["Music"], "field_14": ""}

    assert compute_progress(list(values), values) == 50


def test_progress_in_step_layout():
    assert compute_progress([], {}, step_layout=True, current_step=1, total_steps=4) == 50
    assert compute_progress([], {}, step_layout=True, current_step=0, total_steps=0) == 0


def test_progress_empty_form():
    assert compute_progress([], {}) == 0


def test_payload_keeps_email_outside_responses():
    form = make_form(collect_emails=True)
    schema = build_schema(form.fields, form.collect_emails)
    values = schema.defaults()
    values.update({"email": "ada@example.net", "field_11": "Ada", "field_13": ["Music", "Books"]})

    payload = build_payload(schema, values)

    assert payload["email"] == "ada@example.net"
    assert [r["fieldId"] for r in payload["responses"]] == [11, 12, 13, 14]
    assert payload["responses"][2]["value"] == ["Music", "Books"]


def test_payload_without_email_collection():
    form = make_form()
    schema = build_schema(form.fields, form.collect_emails)

    payload = build_payload(schema, schema.defaults())

    assert "email" not in payload
    assert payload["responses"][2]["value"] == []


def test_session_initial_state():
    session = FormSession(make_form(collect_emails=True))

    assert session.values["email"] == ""
    assert session.values["field_13"] == []
    assert session.progress == 0
    assert session.presentation.border_radius == 4
    assert session.visible_fields()[0].label == "Email address"


def test_toggle_option():
    session = FormSession(make_form())

    session.toggle_option("field_13", "Music", True)
    session.toggle_option("field_13", "Books", True)
    session.toggle_option("field_13", "Music", True)
    session.toggle_option("field_13", "Music", False)

    assert session.values["field_13"] == ["Books"]


def test_set_unknown_value():
    session = FormSession(make_form())

    with pytest.raises(KeyError):
        session.set_value("field_99", "x")


def test_reconfigure_keeps_values():
    session = FormSession(make_form(layout="step"))
    session.set_value("field_11", "Ada")

    session.reconfigure(layout="standard", collect_emails=True)

    assert session.navigator.total_steps == 1
    assert session.values["field_11"] == "Ada"
    assert session.values["email"] == ""


@pytest.mark.anyio
async def test_submit_success():
    session = FormSession(make_form())
    session.set_value("field_11", "Ada")
    session.toggle_option("field_13", "Music", True)
    submitter = FakeSubmitter()

    assert await session.submit(submitter)

    form_id, payload = submitter.calls[0]
    assert form_id == 5
    assert payload["responses"][0] == {"fieldId": 11, "value": "Ada"}
    assert payload["responses"][2] == {"fieldId": 13, "value": ["Music"]}
    assert session.response_id == 77
    assert session.submitted
    assert session.confirmation_path == "/submission/5/thank-you"


@pytest.mark.anyio
async def test_submit_blocked_by_validation():
    session = FormSession(make_form())
    session.set_value("field_14", "many")
    submitter = FakeSubmitter()

    assert not await session.submit(submitter)

    assert submitter.calls == []
    assert session.errors == {"field_11": "Name is required", "field_14": "Age must be a number"}


@pytest.mark.anyio
async def test_submit_rejected_keeps_values():
    session = FormSession(make_form())
    session.set_value("field_11", "Ada")
    submitter = FakeSubmitter(
        error=SubmissionRejected("All required fields must be filled", missing_fields=[11])
    )

    assert not await session.submit(submitter)

    assert session.error_message == "All required fields must be filled"
    assert session.errors == {"field_11": "Name is required"}
    assert session.values["field_11"] == "Ada"
    assert not session.submitting
    assert not session.submitted


@pytest.mark.anyio
async def test_submit_unsuccessful_result_uses_fallback_message():
    session = FormSession(make_form())
    session.set_value("field_11", "Ada")

    assert not await session.submit(FakeSubmitter(result={"success": False}))

    assert session.error_message == SUBMIT_FALLBACK_MESSAGE


@pytest.mark.anyio
async def test_step_flow():
    session = FormSession(make_form(layout="step", collect_emails=True))
    submitter = FakeSubmitter()

    outcome = await session.next(submitter)
    assert outcome.errors == {"email": "A valid email address is required"}
    assert session.navigator.current == 0

    session.set_value("email", "ada@example.net")
    assert (await session.next(submitter)).advanced
    assert session.progress == 40

    session.set_value("field_11", "Ada")
    for _ in range(3):
        assert (await session.next(submitter)).advanced
    assert session.navigator.is_last

    assert session.back()
    assert (await session.next(submitter)).advanced

    outcome = await session.next(submitter)
    assert outcome.submitted
    assert submitter.calls[0][1]["email"] == "ada@example.net"
    assert session.progress == 100
