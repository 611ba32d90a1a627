"""
QuickNotes Backend — Notes Route Handlers
===========================================

What:  HTTP surface of the five note procedures.
Why:   Reads use GET so the client cache can revalidate them; writes use POST
       with a JSON body shaped like the procedure's argument.
How:   Each handler validates its input through a schema, delegates to
       NoteService, and returns the schema it gets back.

Endpoints:
    GET  /api/notes            → Note[]
    GET  /api/notes/{id}       → Note | 404
    POST /api/notes/create     → Note (201)
    POST /api/notes/update     → Note | 404
    POST /api/notes/delete     → {"success": true}
"""

import logging

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from quicknotes.database import get_db_session
from quicknotes.schemas.note import (
    DeleteResponse,
    ErrorResponse,
    NoteCreate,
    NoteDeleteRequest,
    NoteList,
    NoteResponse,
    NoteUpdateRequest,
)
from quicknotes.services.note_service import note_service

logger = logging.getLogger(__name__)

# ── Router Configuration ──────────────────────────────────────────────────
router = APIRouter(prefix="/api", tags=["Notes"])


@router.get(
    "/notes",
    response_model=NoteList,
    responses={
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="List all notes",
    description="Returns every note ordered by creation time, oldest first.",
)
async def list_notes(
    response: Response,
    db: AsyncSession = Depends(get_db_session),
) -> NoteList:
    notes = await note_service.list_notes(db=db)
    response.headers["X-Total-Count"] = str(len(notes))
    return notes


@router.get(
    "/notes/{note_id}",
    response_model=NoteResponse,
    responses={
        404: {"description": "Note not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Get a single note by ID",
)
async def get_note(
    note_id: int,
    response: Response,
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    """
    Get a single note.

    Notes are mutable, so the response must be revalidated on every read
    (the client cache decides when to refetch, not the browser).
    """
    result = await note_service.get_note(db=db, note_id=note_id)
    response.headers["Cache-Control"] = "no-cache"
    return result


@router.post(
    "/notes/create",
    response_model=NoteResponse,
    status_code=201,
    responses={
        422: {"description": "Invalid input (e.g. blank title)"},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Create a note",
    description="Creates a note with favorite=false and returns it with its id and timestamp.",
)
async def create_note(
    payload: NoteCreate,
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    return await note_service.create_note(db=db, payload=payload)


@router.post(
    "/notes/update",
    response_model=NoteResponse,
    responses={
        404: {"description": "Note not found", "model": ErrorResponse},
        422: {"description": "Invalid input"},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Partially update a note",
    description=(
        "Applies only the fields present in `updates` (title, content, favorite) "
        "and returns the note as stored."
    ),
)
async def update_note(
    payload: NoteUpdateRequest,
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    return await note_service.update_note(
        db=db,
        note_id=payload.id,
        updates=payload.updates,
    )


@router.post(
    "/notes/delete",
    response_model=DeleteResponse,
    responses={
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Delete a note",
    description="Deletes the note if it exists. Succeeds for unknown ids too.",
)
async def delete_note(
    payload: NoteDeleteRequest,
    db: AsyncSession = Depends(get_db_session),
) -> DeleteResponse:
    return await note_service.delete_note(db=db, note_id=payload.id)
