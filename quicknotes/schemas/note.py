"""
QuickNotes Backend — Pydantic Request/Response Schemas
=======================================================

What:  Pydantic models defining the API contract between client and backend.
Why:   Strict input validation, automatic serialization, and OpenAPI docs.
How:   FastAPI validates request bodies against these models and serializes
       responses through them. NotesClient parses responses with the same models.

Design Decision:
    Schemas are separate from the SQLAlchemy model because the wire format
    (camelCase `createdAt`, partial updates) differs from the table shape.

Partial updates:
    NoteUpdate relies on Pydantic's "fields set" tracking as the per-field
    present/absent flag. A field that is absent from the JSON is not touched.
    A field sent as null is present, and for `content` that clears it.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator

from quicknotes.models.note import TITLE_MAX_LENGTH


def _clean_title(value: Optional[str]) -> str:
    if value is None:
        raise ValueError("title must not be null")
    stripped = value.strip()
    if not stripped:
        raise ValueError("title must not be empty")
    # Length applies to the stored (trimmed) title
    if len(stripped) > TITLE_MAX_LENGTH:
        raise ValueError(f"title must be at most {TITLE_MAX_LENGTH} characters")
    return stripped


def _clean_content(value: Optional[str]) -> Optional[str]:
    # Blank content is stored as NULL
    if value is None or not value.strip():
        return None
    return value


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class NoteResponse(BaseModel):
    """
    What:  Full representation of a note as it travels over the wire.
    Who:   Returned by every procedure except delete; cached by the client.

    `created_at` is serialized as `createdAt`; both spellings are accepted
    on input so the client can parse server JSON and the service can build
    it from ORM rows.
    """
    id: int = Field(description="Note identifier assigned by the store")
    title: str = Field(description="Note title (non-empty)")
    content: Optional[str] = Field(default=None, description="Optional note body")
    favorite: bool = Field(default=False, description="Whether the note is starred")
    created_at: datetime = Field(
        validation_alias=AliasChoices("created_at", "createdAt"),
        serialization_alias="createdAt",
        description="When the note was created",
    )

    model_config = {"from_attributes": True}


class DeleteResponse(BaseModel):
    """Returned by the delete procedure, whether or not the row existed."""
    success: bool = Field(default=True)


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class NoteCreate(BaseModel):
    """
    Body of POST /api/notes/create.

    title:   required, trimmed, must be non-empty after trimming
    content: optional; blank is treated as absent
    """
    title: str = Field(description="Note title, at most 255 characters after trimming")
    content: Optional[str] = Field(default=None, description="Optional note body")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        return _clean_title(v)

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: Optional[str]) -> Optional[str]:
        return _clean_content(v)


class NoteUpdate(BaseModel):
    """
    The `updates` object of POST /api/notes/update.

    Only the fields present in the request are applied. Validators run
    only for present fields, so an absent title or favorite is never
    rejected. A present one must not be null.
    """
    title: Optional[str] = Field(default=None)
    content: Optional[str] = Field(default=None)
    favorite: Optional[bool] = Field(default=None)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: Optional[str]) -> str:
        return _clean_title(v)

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: Optional[str]) -> Optional[str]:
        return _clean_content(v)

    @field_validator("favorite")
    @classmethod
    def validate_favorite(cls, v: Optional[bool]) -> bool:
        if v is None:
            raise ValueError("favorite must not be null")
        return v

    def changes(self) -> Dict[str, Any]:
        """The present fields and their values, ready for an UPDATE."""
        return self.model_dump(exclude_unset=True)


class NoteUpdateRequest(BaseModel):
    """Body of POST /api/notes/update."""
    id: int = Field(description="Identifier of the note to patch")
    updates: NoteUpdate = Field(default_factory=NoteUpdate)


class NoteDeleteRequest(BaseModel):
    """Body of POST /api/notes/delete."""
    id: int = Field(description="Identifier of the note to delete")


# ══════════════════════════════════════════════════════════════════════════
# Error / Health Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Example:
        {
            "error": "not_found",
            "message": "note with ID '999' was not found",
            "request_id": "1f2e3d4c"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Returned by GET /health."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")


NoteList = List[NoteResponse]
