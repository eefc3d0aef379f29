import csv
import io
import json

import httpx
import pytest

from snapformapi.client import (
    FormNotFound,
    FormsClient,
    FormsClientError,
    SubmissionRejected,
    open_form,
)

pytestmark = pytest.mark.anyio

PUBLIC_FORM = {
    "id": 5,
    "name": "Survey",
    "status": "ACTIVE",
    "collectEmails": True,
    "layout": "step",
    "fields": [
        {"id": 11, "formId": 5, "type": "TEXT", "label": "Name", "required": True, "options": None, "order": 0},
    ],
    "theme": None,
}


def response_page(page, total, has_more):
    return {
        "responses": [
            {
                "id": page,
                "email": None,
                "createdAt": "2024-05-01T09:30:00",
                "completed": True,
                "fields": {"Name": {"value": f"Person {page}", "type": "TEXT", "fieldId": 11}},
            }
        ],
        "pagination": {
            "total": total,
            "totalPages": total,
            "currentPage": page,
            "limit": 1,
            "hasMore": has_more,
        },
    }


def make_client(handler) -> FormsClient:
    return FormsClient("http://test", token="secret", transport=httpx.MockTransport(handler))


async def test_fetch_public_form():
    def handler(request: httpx.Request):
        assert request.url.path == "/api/public-forms/5"
        return httpx.Response(200, json=PUBLIC_FORM)

    async with make_client(handler) as client:
        form = await client.fetch_public_form(5)

    assert form.name == "Survey"
    assert form.collect_emails is True
    assert form.fields[0].options == []


async def test_fetch_missing_form():
    def handler(request):
        return httpx.Response(404, json={"error": "Form not found or not available"})

    async with make_client(handler) as client:
        with pytest.raises(FormNotFound):
            await client.fetch_public_form(5)


async def test_open_form_returns_none_on_errors():
    def handler(request):
        return httpx.Response(500, json={"error": "boom"})

    async with make_client(handler) as client:
        assert await open_form(client, 5) is None


async def test_open_form_returns_none_when_unreachable():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    async with make_client(handler) as client:
        assert await open_form(client, 5) is None


async def test_submit_response_sends_payload():
    seen = {}

    def handler(request: httpx.Request):
        seen["path"] = request.url.path
        seen["auth"] = request.headers.get("Authorization")
        seen["body"] = json.loads(request.content)
        return httpx.Response(201, json={"success": True, "message": "Form submitted successfully", "responseId": 9})

    payload = {"email": "ada@example.net", "responses": [{"fieldId": 11, "value": ["A", "B"]}]}
    async with make_client(handler) as client:
        result = await client.submit_response(5, payload)

    assert result["responseId"] == 9
    assert seen == {"path": "/api/forms/5/submit", "auth": "Bearer secret", "body": payload}


async def test_submit_response_rejected():
    def handler(request):
        return httpx.Response(
            400, json={"error": "All required fields must be filled", "missingRequiredFields": [11]}
        )

    async with make_client(handler) as client:
        with pytest.raises(SubmissionRejected) as exc_info:
            await client.submit_response(5, {"responses": []})

    assert exc_info.value.message == "All required fields must be filled"
    assert exc_info.value.missing_fields == [11]
    assert exc_info.value.status_code == 400


async def test_submit_response_server_error_without_body():
    def handler(request):
        return httpx.Response(502, text="Bad gateway")

    async with make_client(handler) as client:
        with pytest.raises(SubmissionRejected) as exc_info:
            await client.submit_response(5, {"responses": []})

    assert exc_info.value.message == "Failed to submit the form. Please try again."


async def test_list_responses_error():
    def handler(request):
        return httpx.Response(401, json={"error": "Not authenticated"})

    async with make_client(handler) as client:
        with pytest.raises(FormsClientError):
            await client.list_responses(5)


async def test_export_responses_pages_through_everything():
    pages = []

    def handler(request: httpx.Request):
        page = int(request.url.params["page"])
        pages.append(page)
        return httpx.Response(200, json=response_page(page, total=3, has_more=page < 3))

    async with make_client(handler) as client:
        text = await client.export_responses(5, page_size=1)

    rows = list(csv.reader(io.StringIO(text)))
    assert pages == [1, 2, 3]
    assert rows[0] == ["ID", "Email", "Submitted At", "Name"]
    assert [row[3] for row in rows[1:]] == ["Person 1", "Person 2", "Person 3"]
