"""
QuickNotes Client — Query Cache
=================================

What:  A small keyed cache of fetched query results, plus the two note
       query bindings the pages read through.
How:   Keys are tuples. Invalidation works by key prefix, so invalidating
       ("notes",) marks the list and every by-id entry stale. A stale entry
       keeps its value until the next ensure() refetches it.

Bindings:
    notes_list_query(client)        key ("notes",)        → client.list_notes()
    note_by_id_query(client, id)    key ("notes", id)     → client.get_note(id)
"""

import logging
from typing import Any, Awaitable, Callable, Dict, Hashable, Optional, Tuple

logger = logging.getLogger(__name__)

QueryKey = Tuple[Hashable, ...]

NOTES_KEY: QueryKey = ("notes",)


class QueryDescriptor:
    """A cache key paired with the coroutine function that fetches it."""

    def __init__(self, key: QueryKey, fetch: Callable[[], Awaitable[Any]]):
        self.key = key
        self.fetch = fetch

    def __repr__(self) -> str:
        return f"<QueryDescriptor(key={self.key!r})>"


def notes_list_query(client) -> QueryDescriptor:
    return QueryDescriptor(NOTES_KEY, client.list_notes)


def note_by_id_query(client, note_id: int) -> QueryDescriptor:
    async def fetch():
        return await client.get_note(note_id)

    return QueryDescriptor(NOTES_KEY + (note_id,), fetch)


class _Entry:
    __slots__ = ("value", "stale")

    def __init__(self, value: Any):
        self.value = value
        self.stale = False


class QueryCache:
    """
    Keyed store of query results.

    Fetch errors propagate to the caller and leave the cache as it was.
    """

    def __init__(self):
        self._entries: Dict[QueryKey, _Entry] = {}

    def __contains__(self, key: QueryKey) -> bool:
        return key in self._entries

    async def ensure(self, query: QueryDescriptor) -> Any:
        """Return the cached value, fetching first if missing or stale."""
        entry = self._entries.get(query.key)
        if entry is None or entry.stale:
            return await self.fetch(query)
        return entry.value

    async def fetch(self, query: QueryDescriptor) -> Any:
        """Always run the query and store its result."""
        logger.debug("Fetching query %s", query.key)
        value = await query.fetch()
        self._entries[query.key] = _Entry(value)
        return value

    def get(self, key: QueryKey, default: Optional[Any] = None) -> Any:
        entry = self._entries.get(key)
        return entry.value if entry is not None else default

    def set(self, key: QueryKey, value: Any) -> None:
        self._entries[key] = _Entry(value)

    def is_stale(self, key: QueryKey) -> bool:
        entry = self._entries.get(key)
        return entry is None or entry.stale

    def invalidate(self, prefix: QueryKey) -> int:
        """Mark every entry whose key starts with `prefix` stale; return how many."""
        count = 0
        for key, entry in self._entries.items():
            if key[: len(prefix)] == prefix:
                entry.stale = True
                count += 1
        logger.debug("Invalidated %d queries under %s", count, prefix)
        return count

    def remove(self, key: QueryKey) -> None:
        self._entries.pop(key, None)
