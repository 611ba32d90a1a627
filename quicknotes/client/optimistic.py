"""
QuickNotes Client — Optimistic Updates
========================================

What:  Apply a note change to the cache before the server confirms it.
How:   1. Snapshot the cached note
       2. Write the merged (speculative) note into the cache
       3. Run the mutation
       4. Success: replace the entry with the server's record
          Failure: put the snapshot back and re-raise

The helper only needs get/set on the cache, so it works with QueryCache or
any object offering the same two methods.
"""

import logging
from typing import Any, Awaitable, Callable, Mapping, Optional

from quicknotes.schemas.note import NoteResponse

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = frozenset({"title", "content", "favorite"})


def apply_note_changes(note: NoteResponse, changes: Mapping[str, Any]) -> NoteResponse:
    """
    Merge `changes` into a copy of `note`, touching only the keys present.

    Raises ValueError for keys other than title, content and favorite.
    """
    unknown = set(changes) - EDITABLE_FIELDS
    if unknown:
        raise ValueError(f"Cannot change note field(s): {sorted(unknown)}")
    return note.model_copy(update=dict(changes))


class OptimisticUpdate:
    """One speculative change to one cache entry."""

    def __init__(self, cache, key, changes: Mapping[str, Any]):
        self.cache = cache
        self.key = key
        self.changes = dict(changes)
        self.snapshot: Optional[NoteResponse] = None

    def apply(self) -> None:
        self.snapshot = self.cache.get(self.key)
        if self.snapshot is not None:
            self.cache.set(self.key, apply_note_changes(self.snapshot, self.changes))

    def commit(self, result: NoteResponse) -> None:
        self.cache.set(self.key, result)

    def rollback(self) -> None:
        # Nothing was cached before apply(); nothing to restore
        if self.snapshot is not None:
            self.cache.set(self.key, self.snapshot)


async def mutate_optimistically(
    cache,
    key,
    changes: Mapping[str, Any],
    mutation: Callable[[], Awaitable[NoteResponse]],
) -> NoteResponse:
    """Run `mutation` with `changes` applied to `cache[key]` in the meantime."""
    update = OptimisticUpdate(cache, key, changes)
    update.apply()
    try:
        result = await mutation()
    except Exception:
        logger.info("Mutation of %s failed; restoring previous value", key)
        update.rollback()
        raise
    update.commit(result)
    return result
