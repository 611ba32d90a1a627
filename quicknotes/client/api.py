"""
QuickNotes Client — HTTP API Wrapper
======================================

What:  The five note procedures as coroutines over httpx.
Why:   Pages and the query cache call procedures like functions; this class
       hides the transport and turns HTTP failures into app exceptions.

Error mapping:
    404                  → NotFoundError (same class the server raises)
    other non-2xx        → NotesApiError(status_code=...)
    transport failure    → NotesApiError(status_code=None)
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from quicknotes.exceptions import NotesApiError, NotFoundError
from quicknotes.schemas.note import DeleteResponse, NoteResponse

logger = logging.getLogger(__name__)


def _error_message(response: httpx.Response) -> str:
    """Best human-readable message from an error response body."""
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase

    if isinstance(body, dict):
        if body.get("message"):
            return str(body["message"])
        detail = body.get("detail")
        # FastAPI request validation: list of {"loc": ..., "msg": ...}
        if isinstance(detail, list):
            return "; ".join(str(item.get("msg", item)) for item in detail)
        if detail:
            return str(detail)
    return response.reason_phrase


class NotesClient:
    """
    Async client for the notes API.

    Usage:
        async with NotesClient("http://localhost:8000") as client:
            note = await client.create_note("Groceries", "Milk, eggs")
            await client.update_note(note.id, {"favorite": True})

    Pass `http` to reuse an existing httpx.AsyncClient (tests hand in one
    bound to the ASGI app). A client passed in is not closed by aclose().
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        http: Optional[httpx.AsyncClient] = None,
        timeout: float = 10.0,
    ):
        self._owns_http = http is None
        self._http = http or httpx.AsyncClient(base_url=base_url, timeout=timeout)

    async def __aenter__(self) -> "NotesClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        json: Optional[Dict[str, Any]] = None,
        note_id: Optional[int] = None,
    ) -> Any:
        try:
            response = await self._http.request(method, path, json=json)
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %s", method, path, str(e))
            raise NotesApiError(message=f"Could not reach the notes API: {e}") from e

        if response.status_code == 404:
            raise NotFoundError(
                resource="note",
                resource_id=str(note_id) if note_id is not None else None,
            )
        if response.is_error:
            raise NotesApiError(
                message=_error_message(response),
                status_code=response.status_code,
                context={"request_id": response.headers.get("X-Request-ID", "")},
            )
        return response.json()

    # ── Procedures ────────────────────────────────────────────────────────

    async def list_notes(self) -> List[NoteResponse]:
        data = await self._request("GET", "/api/notes")
        return [NoteResponse.model_validate(item) for item in data]

    async def get_note(self, note_id: int) -> NoteResponse:
        data = await self._request("GET", f"/api/notes/{note_id}", note_id=note_id)
        return NoteResponse.model_validate(data)

    async def create_note(self, title: str, content: Optional[str] = None) -> NoteResponse:
        payload: Dict[str, Any] = {"title": title}
        if content is not None:
            payload["content"] = content
        data = await self._request("POST", "/api/notes/create", json=payload)
        return NoteResponse.model_validate(data)

    async def update_note(self, note_id: int, updates: Dict[str, Any]) -> NoteResponse:
        """Send only the keys in `updates`; absent keys stay unchanged server-side."""
        data = await self._request(
            "POST",
            "/api/notes/update",
            json={"id": note_id, "updates": dict(updates)},
            note_id=note_id,
        )
        return NoteResponse.model_validate(data)

    async def delete_note(self, note_id: int) -> DeleteResponse:
        data = await self._request(
            "POST", "/api/notes/delete", json={"id": note_id}, note_id=note_id
        )
        return DeleteResponse.model_validate(data)
