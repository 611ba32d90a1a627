"""
QuickNotes Client — Page State
================================

What:  Interaction state for the two UI routes, minus the rendering.
Why:   A view layer (web, TUI, tests) binds to these objects. They own the
       form buffers and pending/error flags, and they call the procedures
       and keep the shared cache consistent afterwards.

    NotesListPage       /notes        list + create form
    NoteDetailPage      /notes/{id}   view, edit, favorite, two-step delete

Failures of a mutation are shown inline through `error`
("Error creating note: ..."), never retried.
"""

import logging
from typing import Any, Dict, List, Optional

from quicknotes.client.optimistic import mutate_optimistically
from quicknotes.client.query_cache import (
    NOTES_KEY,
    QueryCache,
    note_by_id_query,
    notes_list_query,
)
from quicknotes.exceptions import NotFoundError, QuickNotesError
from quicknotes.schemas.note import NoteResponse

logger = logging.getLogger(__name__)

LIST_PATH = "/notes"


class NotesListPage:
    """List of all notes with a create form on top."""

    page_title = "Notes"

    def __init__(self, client, cache: QueryCache):
        self.client = client
        self.cache = cache
        self.title = ""
        self.content = ""
        self.error: Optional[str] = None
        self.is_pending = False

    async def load(self) -> List[NoteResponse]:
        return await self.cache.ensure(notes_list_query(self.client))

    @property
    def notes(self) -> List[NoteResponse]:
        return self.cache.get(NOTES_KEY) or []

    @property
    def can_submit(self) -> bool:
        return bool(self.title.strip()) and not self.is_pending

    async def submit(self) -> Optional[NoteResponse]:
        """
        Create a note from the form.

        Blank titles are ignored. On success the form is cleared and the list
        refetched; on failure the form keeps its input.
        """
        title = self.title.strip()
        if not title or self.is_pending:
            return None

        self.is_pending = True
        self.error = None
        try:
            note = await self.client.create_note(title, self.content.strip() or None)
        except QuickNotesError as e:
            logger.warning("Creating note failed: %s", e.message)
            self.error = f"Error creating note: {e.message}"
            return None
        finally:
            self.is_pending = False

        # The note exists now; a failed refetch must not undo that
        self.title = ""
        self.content = ""
        self.cache.invalidate(NOTES_KEY)
        try:
            await self.load()
        except QuickNotesError as e:
            logger.warning("Refreshing notes after create failed: %s", e.message)
            self.error = f"Error loading notes: {e.message}"
        return note


class NoteDetailPage:
    """A single note: display, edit mode, favorite toggle, delete with confirm."""

    def __init__(self, client, cache: QueryCache, note_id: int):
        self.client = client
        self.cache = cache
        self.note_id = note_id

        self.not_found = False
        self.error: Optional[str] = None
        self.navigate_to: Optional[str] = None

        self.is_editing = False
        self.edit_title = ""
        self.edit_content = ""
        self.is_updating = False

        self.show_delete_confirm = False
        self.is_deleting = False

    @property
    def key(self):
        return NOTES_KEY + (self.note_id,)

    @property
    def note(self) -> Optional[NoteResponse]:
        return self.cache.get(self.key)

    @property
    def page_title(self) -> str:
        note = self.note
        return note.title if note is not None else "Note not found"

    def _require_note(self) -> NoteResponse:
        note = self.note
        if note is None:
            raise NotFoundError(resource="note", resource_id=str(self.note_id))
        return note

    def _reset_buffers(self, note: NoteResponse) -> None:
        self.edit_title = note.title
        self.edit_content = note.content or ""

    async def load(self) -> Optional[NoteResponse]:
        """Populate the by-id query; an unknown id flips `not_found`."""
        try:
            note = await self.cache.ensure(note_by_id_query(self.client, self.note_id))
        except NotFoundError:
            self.not_found = True
            return None
        self.not_found = False
        if not self.is_editing:
            self._reset_buffers(note)
        return note

    # ── Edit mode ─────────────────────────────────────────────────────────

    def start_edit(self) -> None:
        self._reset_buffers(self._require_note())
        self.is_editing = True

    def cancel_edit(self) -> None:
        self._reset_buffers(self._require_note())
        self.is_editing = False

    async def save_edit(self) -> Optional[NoteResponse]:
        title = self.edit_title.strip()
        if not title:
            return None
        # Emptied content is sent as null so it is cleared
        return await self._update({
            "title": title,
            "content": self.edit_content.strip() or None,
        })

    async def toggle_favorite(self) -> Optional[NoteResponse]:
        note = self._require_note()
        return await self._update({"favorite": not note.favorite})

    async def _update(self, changes: Dict[str, Any]) -> Optional[NoteResponse]:
        # One mutation at a time; overlapping snapshots would roll back each other
        if self.is_updating:
            return None
        self.is_updating = True
        self.error = None
        try:
            note = await mutate_optimistically(
                self.cache,
                self.key,
                changes,
                lambda: self.client.update_note(self.note_id, changes),
            )
        except QuickNotesError as e:
            logger.warning("Updating note %s failed: %s", self.note_id, e.message)
            self.error = f"Error updating note: {e.message}"
            return None
        finally:
            self.is_updating = False

        self.cache.invalidate(NOTES_KEY)
        self.is_editing = False
        self._reset_buffers(note)
        return note

    # ── Delete (two-step) ─────────────────────────────────────────────────

    def request_delete(self) -> None:
        self.show_delete_confirm = True

    def cancel_delete(self) -> None:
        self.show_delete_confirm = False

    async def confirm_delete(self) -> bool:
        """Delete after request_delete(); on success set `navigate_to` to the list."""
        if not self.show_delete_confirm or self.is_deleting:
            return False

        self.is_deleting = True
        self.error = None
        try:
            await self.client.delete_note(self.note_id)
        except QuickNotesError as e:
            logger.warning("Deleting note %s failed: %s", self.note_id, e.message)
            self.error = f"Error deleting note: {e.message}"
            return False
        finally:
            self.is_deleting = False

        self.cache.remove(self.key)
        self.cache.invalidate(NOTES_KEY)
        self.show_delete_confirm = False
        self.navigate_to = LIST_PATH
        return True
