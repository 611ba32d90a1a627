# Client package init
"""
QuickNotes — Client Side
=========================

What:  The pieces a UI needs on top of the HTTP API, without any rendering.

    - api.py:          NotesClient, the five procedures over httpx
    - query_cache.py:  keyed query cache and the two note query bindings
    - optimistic.py:   snapshot / apply / commit-or-rollback helper
    - pages.py:        state for the list page and the detail page
"""

from quicknotes.client.api import NotesClient
from quicknotes.client.optimistic import (
    OptimisticUpdate,
    apply_note_changes,
    mutate_optimistically,
)
from quicknotes.client.pages import NoteDetailPage, NotesListPage
from quicknotes.client.query_cache import (
    NOTES_KEY,
    QueryCache,
    QueryDescriptor,
    note_by_id_query,
    notes_list_query,
)

__all__ = [
    "NOTES_KEY",
    "NoteDetailPage",
    "NotesClient",
    "NotesListPage",
    "OptimisticUpdate",
    "QueryCache",
    "QueryDescriptor",
    "apply_note_changes",
    "mutate_optimistically",
    "note_by_id_query",
    "notes_list_query",
]
