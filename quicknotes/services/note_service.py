"""
QuickNotes Backend — Note Service (Business Logic)
====================================================

What:  The five note procedures: list, get, create, update, delete.
Why:   Keeps persistence rules in one place, independent of HTTP concerns.
How:   Each procedure issues at most two statements through the session it is
       handed: a write, then a read-back of the affected row.
Who:   Called by route handlers in quicknotes.routes.notes.

Design Decision:
    NoteService is stateless. It receives the db session for each call, so
    every request runs in its own session and tests can pass a mock.

Consistency:
    There is no application-level locking. Concurrent updates to the same
    note are last-write-wins. Create is insert-then-read-back, so a delete
    that lands between the two statements makes the read-back miss. That
    case surfaces as NotFoundError.
"""

import logging
from typing import List, Optional

from sqlalchemy import asc, delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from quicknotes.exceptions import DatabaseError, NotFoundError
from quicknotes.models.note import Note
from quicknotes.schemas.note import (
    DeleteResponse,
    NoteCreate,
    NoteResponse,
    NoteUpdate,
)

logger = logging.getLogger(__name__)


class NoteService:
    """
    Business logic layer for note operations.

    Error Handling Strategy:
        A missing row becomes NotFoundError. Any SQLAlchemyError is wrapped
        in DatabaseError, which keeps SQL details out of the API response.
        The original error is logged.
    """

    async def _fetch(self, db: AsyncSession, note_id: int) -> Optional[Note]:
        # populate_existing: a row already in the session is overwritten with
        # what the database actually stored, so read-backs are real re-reads
        result = await db.execute(
            select(Note)
            .where(Note.id == note_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def list_notes(self, db: AsyncSession) -> List[NoteResponse]:
        """
        Return every note, oldest first.

        Query plan:
            SELECT * FROM notes ORDER BY created_at ASC, id ASC
            The id tie-break keeps the order stable for equal timestamps.
        """
        logger.info("Fetching all notes...")
        try:
            result = await db.execute(
                select(Note).order_by(asc(Note.created_at), asc(Note.id))
            )
            notes = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error("Database error listing notes: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve notes. Please try again.",
                context={"error_type": type(e).__name__},
            )
        return [NoteResponse.model_validate(note) for note in notes]

    async def get_note(self, db: AsyncSession, note_id: int) -> NoteResponse:
        """
        Retrieve a single note by ID.

        Raises:
            NotFoundError: no note with that id (→ 404)
            DatabaseError: query execution failed (→ 500)
        """
        logger.info("Fetching note with id %s...", note_id)
        try:
            note = await self._fetch(db, note_id)
        except SQLAlchemyError as e:
            logger.error("Database error fetching note %s: %s", note_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the note. Please try again.",
                context={"note_id": note_id},
            )

        if note is None:
            raise NotFoundError(resource="note", resource_id=str(note_id))

        return NoteResponse.model_validate(note)

    async def create_note(self, db: AsyncSession, payload: NoteCreate) -> NoteResponse:
        """
        Insert a note with favorite=false and return it as stored.

        Workflow:
            1. INSERT the row (flush assigns the generated id)
            2. SELECT it back by id so the response carries the stored values
        """
        logger.info("Creating new note...")
        try:
            note = Note(
                title=payload.title,
                content=payload.content,
                favorite=False,
            )
            db.add(note)
            await db.flush()
            new_id = note.id

            created = await self._fetch(db, new_id)
        except SQLAlchemyError as e:
            logger.error("Database error creating note: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not create the note. Please try again.",
                context={"error_type": type(e).__name__},
            )

        if created is None:
            # Deleted between insert and read-back
            raise NotFoundError(resource="note", resource_id=str(new_id))

        logger.info("Note %s created", created.id)
        return NoteResponse.model_validate(created)

    async def update_note(
        self,
        db: AsyncSession,
        note_id: int,
        updates: NoteUpdate,
    ) -> NoteResponse:
        """
        Apply a partial patch, then re-read the note.

        Only the fields present in `updates` are written; an empty patch
        issues no UPDATE at all and just re-reads.

        Raises:
            NotFoundError: the note does not exist after the write
            DatabaseError: a statement failed
        """
        logger.info("Updating note with id %s...", note_id)
        changes = updates.changes()
        try:
            if changes:
                await db.execute(
                    update(Note).where(Note.id == note_id).values(**changes)
                )
            updated = await self._fetch(db, note_id)
        except SQLAlchemyError as e:
            logger.error("Database error updating note %s: %s", note_id, str(e))
            raise DatabaseError(
                message="Could not update the note. Please try again.",
                context={"note_id": note_id, "fields": sorted(changes)},
            )

        if updated is None:
            raise NotFoundError(resource="note", resource_id=str(note_id))

        return NoteResponse.model_validate(updated)

    async def delete_note(self, db: AsyncSession, note_id: int) -> DeleteResponse:
        """
        Remove the note if it exists.

        Deleting an id that is already gone still reports success.
        """
        logger.info("Deleting note with id %s...", note_id)
        try:
            result = await db.execute(delete(Note).where(Note.id == note_id))
        except SQLAlchemyError as e:
            logger.error("Database error deleting note %s: %s", note_id, str(e))
            raise DatabaseError(
                message="Could not delete the note. Please try again.",
                context={"note_id": note_id},
            )

        logger.debug("Delete of note %s affected %s row(s)", note_id, result.rowcount)
        return DeleteResponse(success=True)


# ── Singleton Instance ────────────────────────────────────────────────────
# NoteService is stateless; no per-instance state needed
note_service = NoteService()
