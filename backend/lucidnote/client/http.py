"""
HTTP note actions for the LucidNote API.

Same interface and result models as the in-process NoteActions, so NoteSync
can run against either. Transport and HTTP failures come back as tagged
results; nothing is raised.
"""

from typing import Any

import httpx
import pydantic

from lucidnote.logging import get_logger
from lucidnote.models import (
    ActionError,
    ActionResult,
    ErrorKind,
    Note,
    NoteListResult,
    NoteResult,
    NoteUpdate,
)

logger = get_logger("client.http")

_KIND_BY_STATUS = {
    400: ErrorKind.VALIDATION,
    401: ErrorKind.AUTH,
    403: ErrorKind.AUTH,
    404: ErrorKind.NOT_FOUND,
    422: ErrorKind.VALIDATION,
}


def error_from_response(response: httpx.Response) -> ActionError:
    """Decode an error body (``{"detail": ...}`` or ``{"error": ...}``) into an ActionError."""
    try:
        body: Any = response.json()
    except ValueError:
        body = None

    kind = _KIND_BY_STATUS.get(response.status_code, ErrorKind.STORE)
    message = f"HTTP {response.status_code}"
    if isinstance(body, dict):
        detail = body.get("detail", body)
        if isinstance(detail, dict):
            try:
                return ActionError.model_validate(detail)
            except pydantic.ValidationError:
                pass
            if isinstance(detail.get("error"), str):
                message = detail["error"]
            if detail.get("kind") in {k.value for k in ErrorKind}:
                kind = ErrorKind(detail["kind"])
        elif isinstance(detail, str):
            message = detail
        elif isinstance(detail, list) and detail:
            message = str(detail[0].get("msg", message)) if isinstance(detail[0], dict) else message
    return ActionError(kind=kind, message=message)


def transport_error(error: Exception) -> ActionError:
    return ActionError(kind=ErrorKind.STORE, message=f"Network error: {error}")


class ApiClient:
    """Owns the httpx client shared by the HTTP-backed clients."""

    def __init__(
        self,
        base_url: str,
        access_token: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 30.0,
    ):
        headers = {"Authorization": f"Bearer {access_token}"} if access_token else {}
        self.client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self.client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response | ActionError:
        try:
            response = await self.client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"{method} {url} failed: {e}")
            return transport_error(e)
        if response.is_error:
            return error_from_response(response)
        return response


class HttpNoteActions(ApiClient):
    """Note actions over the REST API, authenticated with a bearer token."""

    def _note_result(self, response: httpx.Response | ActionError) -> NoteResult:
        if isinstance(response, ActionError):
            return NoteResult(success=False, error=response)
        try:
            return NoteResult(success=True, note=Note.model_validate(response.json()))
        except (ValueError, pydantic.ValidationError) as e:
            return NoteResult(success=False, error=ActionError(kind=ErrorKind.STORE, message=f"Malformed note: {e}"))

    async def list_notes(self) -> NoteListResult:
        response = await self._request("GET", "/api/notes")
        if isinstance(response, ActionError):
            return NoteListResult(success=False, error=response)
        try:
            notes = [Note.model_validate(item) for item in response.json()]
        except (ValueError, TypeError, pydantic.ValidationError) as e:
            return NoteListResult(success=False, error=ActionError(kind=ErrorKind.STORE, message=f"Malformed notes: {e}"))
        return NoteListResult(success=True, notes=notes)

    async def get_note(self, note_id: str) -> NoteResult:
        return self._note_result(await self._request("GET", f"/api/notes/{note_id}"))

    async def create_note(self, title: str, content: str) -> NoteResult:
        return self._note_result(
            await self._request("POST", "/api/notes", json={"title": title, "content": content})
        )

    async def update_note(self, note_id: str, fields: NoteUpdate | dict) -> NoteResult:
        if isinstance(fields, dict):
            fields = NoteUpdate(**fields)
        return self._note_result(
            await self._request("PUT", f"/api/notes/{note_id}", json=fields.model_dump(exclude_none=True))
        )

    async def delete_note(self, note_id: str) -> ActionResult:
        response = await self._request("DELETE", f"/api/notes/{note_id}")
        if isinstance(response, ActionError):
            return ActionResult(success=False, error=response)
        return ActionResult(success=True)

    async def save_summary(self, note_id: str, summary: str) -> NoteResult:
        return self._note_result(
            await self._request("PUT", f"/api/notes/{note_id}/summary", json={"summary": summary})
        )
