"""Async HTTP client for the public side of the forms API."""
import logging
from typing import Any, Dict, List, Optional

import httpx

from snapformapi.export import responses_to_csv
from snapformapi.models.form import Form, ResponseList

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = httpx.Timeout(10.0, connect=5.0)
SUBMIT_FALLBACK_MESSAGE = "Failed to submit the form. Please try again."


class FormsClientError(Exception):
    pass


class FormNotFound(FormsClientError):
    pass


class SubmissionRejected(FormsClientError):
    """The server refused a submission; ``message`` is safe to show."""

    def __init__(self, message: str, missing_fields: Optional[List[int]] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.missing_fields = missing_fields or []
        self.status_code = status_code


def _error_body(response: httpx.Response) -> Dict[str, Any]:
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


class FormsClient:
    """Thin wrapper around httpx.AsyncClient; pass ``transport`` to mock it."""

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers=headers,
            timeout=DEFAULT_TIMEOUT,
            transport=transport,
        )

    async def __aenter__(self) -> "FormsClient":
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()

    async def aclose(self):
        await self._client.aclose()

    async def _get_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        try:
            response = await self._client.get(url, params=params)
        except httpx.HTTPError as e:
            raise FormsClientError(f"GET {url} failed: {e}") from e
        if response.status_code == 404:
            raise FormNotFound(_error_body(response).get("error") or "Form not found")
        if response.is_error:
            raise FormsClientError(
                f"GET {url} returned {response.status_code}: {_error_body(response).get('error')}"
            )
        return response.json()

    async def fetch_public_form(self, form_id: int) -> Form:
        return Form.model_validate(await self._get_json(f"/api/public-forms/{form_id}"))

    async def submit_response(self, form_id: int, payload: Dict[str, Any]) -> Dict[str, Any]:
        try:
            response = await self._client.post(f"/api/forms/{form_id}/submit", json=payload)
        except httpx.HTTPError as e:
            logger.error(f"Submitting to form {form_id} failed: {e}")
            raise SubmissionRejected(SUBMIT_FALLBACK_MESSAGE) from e

        body = _error_body(response)
        if response.is_error:
            raise SubmissionRejected(
                body.get("error") or SUBMIT_FALLBACK_MESSAGE,
                missing_fields=body.get("missingRequiredFields"),
                status_code=response.status_code,
            )
        return body

    async def list_responses(self, form_id: int, page: int = 1, limit: int = 10) -> ResponseList:
        body = await self._get_json(f"/api/forms/{form_id}/responses", params={"page": page, "limit": limit})
        return ResponseList.model_validate(body)

    async def export_responses(self, form_id: int, page_size: int = 100) -> str:
        """Every response of a form as CSV text."""
        responses = []
        page = 1
        while True:
            batch = await self.list_responses(form_id, page=page, limit=page_size)
            responses.extend(batch.responses)
            if not batch.pagination.has_more:
                break
            page += 1
        logger.info(f"Exporting {len(responses)} responses of form {form_id}")
        return responses_to_csv(responses)


async def open_form(client: FormsClient, form_id: int) -> Optional[Form]:
    """Load a public form, or ``None`` when it cannot be shown."""
    try:
        return await client.fetch_public_form(form_id)
    except FormNotFound:
        logger.warning(f"Form {form_id} is not available")
        return None
    except FormsClientError:
        logger.exception(f"Could not load form {form_id}")
        return None
