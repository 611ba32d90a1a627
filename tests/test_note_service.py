"""
QuickNotes — Note Service Unit Tests
=======================================

What:  Tests for NoteService business logic (list, get, create, update, delete).
How:   Uses mock DB sessions (no real DB); the end-to-end behavior against
       SQLite lives in test_notes_api.py.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock

from sqlalchemy.exc import OperationalError

from quicknotes.exceptions import DatabaseError, NotFoundError
from quicknotes.schemas.note import NoteCreate, NoteUpdate
from quicknotes.services.note_service import NoteService


def _result_with(note):
    result = MagicMock()
    result.scalar_one_or_none.return_value = note
    return result


class TestNoteServiceList:
    """Tests for list_notes."""

    def setup_method(self):
        self.service = NoteService()

    @pytest.mark.asyncio
    async def test_list_notes_empty(self, mock_db_session):
        """Empty table should return an empty list."""
        mock_result = MagicMock()
        mock_result.scalars.return_value.all.return_value = []
        mock_db_session.execute.return_value = mock_result

        result = await self.service.list_notes(mock_db_session)

        assert result == []

    @pytest.mark.asyncio
    async def test_list_notes_with_results(self, mock_db_session, make_note):
        """Rows come back as NoteResponse objects in query order."""
        rows = [make_note(note_id=i, title=f"Note {i}") for i in range(1, 4)]
        mock_result = MagicMock()
        mock_result.scalars.return_value.all.return_value = rows
        mock_db_session.execute.return_value = mock_result

        result = await self.service.list_notes(mock_db_session)

        assert [n.id for n in result] == [1, 2, 3]
        assert result[0].title == "Note 1"

    @pytest.mark.asyncio
    async def test_list_notes_orders_by_created_at(self, mock_db_session):
        """The statement orders by created_at, then id."""
        mock_result = MagicMock()
        mock_result.scalars.return_value.all.return_value = []
        mock_db_session.execute.return_value = mock_result

        await self.service.list_notes(mock_db_session)

        statement = mock_db_session.execute.await_args.args[0]
        sql = str(statement).lower()
        assert "order by notes.created_at asc, notes.id asc" in sql

    @pytest.mark.asyncio
    async def test_list_notes_database_error(self, mock_db_session):
        mock_db_session.execute.side_effect = OperationalError("SELECT", {}, Exception("down"))

        with pytest.raises(DatabaseError):
            await self.service.list_notes(mock_db_session)


class TestNoteServiceGet:
    """Tests for get_note retrieval."""

    def setup_method(self):
        self.service = NoteService()

    @pytest.mark.asyncio
    async def test_get_note_found(self, mock_db_session, make_note):
        """Existing note should return NoteResponse."""
        mock_db_session.execute.return_value = _result_with(make_note(note_id=7))

        result = await self.service.get_note(mock_db_session, 7)

        assert result.id == 7
        assert result.title == "Groceries"
        assert result.content == "Milk, eggs"
        assert result.favorite is False

    @pytest.mark.asyncio
    async def test_get_note_not_found(self, mock_db_session):
        """Non-existent note should raise NotFoundError."""
        mock_db_session.execute.return_value = _result_with(None)

        with pytest.raises(NotFoundError) as exc_info:
            await self.service.get_note(mock_db_session, 999)

        assert exc_info.value.resource_id == "999"

    @pytest.mark.asyncio
    async def test_get_note_database_error(self, mock_db_session):
        mock_db_session.execute.side_effect = OperationalError("SELECT", {}, Exception("down"))

        with pytest.raises(DatabaseError):
            await self.service.get_note(mock_db_session, 1)


class TestNoteServiceCreate:
    """Tests for create_note."""

    def setup_method(self):
        self.service = NoteService()

    @pytest.mark.asyncio
    async def test_create_note_inserts_then_reads_back(self, mock_db_session, make_note):
        stored = make_note(note_id=1)
        mock_db_session.execute.return_value = _result_with(stored)

        result = await self.service.create_note(
            mock_db_session, NoteCreate(title="Groceries", content="Milk, eggs")
        )

        added = mock_db_session.add.call_args.args[0]
        assert added.title == "Groceries"
        assert added.content == "Milk, eggs"
        assert added.favorite is False
        mock_db_session.flush.assert_awaited_once()
        mock_db_session.execute.assert_awaited_once()
        assert result.id == 1
        assert result.created_at == stored.created_at

    @pytest.mark.asyncio
    async def test_create_note_without_content(self, mock_db_session, make_note):
        mock_db_session.execute.return_value = _result_with(make_note(content=None))

        result = await self.service.create_note(mock_db_session, NoteCreate(title="Todo"))

        added = mock_db_session.add.call_args.args[0]
        assert added.content is None
        assert result.content is None

    @pytest.mark.asyncio
    async def test_create_note_read_back_missing(self, mock_db_session):
        """A row deleted between insert and read-back surfaces as NotFoundError."""
        mock_db_session.execute.return_value = _result_with(None)

        with pytest.raises(NotFoundError):
            await self.service.create_note(mock_db_session, NoteCreate(title="Gone"))

    @pytest.mark.asyncio
    async def test_create_note_flush_failure(self, mock_db_session):
        mock_db_session.flush = AsyncMock(
            side_effect=OperationalError("INSERT", {}, Exception("disk full"))
        )

        with pytest.raises(DatabaseError):
            await self.service.create_note(mock_db_session, NoteCreate(title="Todo"))


class TestNoteServiceUpdate:
    """Tests for update_note partial patches."""

    def setup_method(self):
        self.service = NoteService()

    @pytest.mark.asyncio
    async def test_update_writes_only_present_fields(self, mock_db_session, make_note):
        updated = make_note(favorite=True)
        mock_db_session.execute = AsyncMock(side_effect=[MagicMock(), _result_with(updated)])

        result = await self.service.update_note(
            mock_db_session, 1, NoteUpdate(favorite=True)
        )

        update_stmt = mock_db_session.execute.await_args_list[0].args[0]
        assert set(update_stmt.compile().params) == {"favorite", "id_1"}
        assert result.favorite is True

    @pytest.mark.asyncio
    async def test_update_empty_patch_only_rereads(self, mock_db_session, make_note):
        mock_db_session.execute.return_value = _result_with(make_note())

        result = await self.service.update_note(mock_db_session, 1, NoteUpdate())

        mock_db_session.execute.assert_awaited_once()
        assert result.title == "Groceries"

    @pytest.mark.asyncio
    async def test_update_missing_note(self, mock_db_session):
        mock_db_session.execute = AsyncMock(side_effect=[MagicMock(), _result_with(None)])

        with pytest.raises(NotFoundError):
            await self.service.update_note(mock_db_session, 42, NoteUpdate(title="New"))

    @pytest.mark.asyncio
    async def test_update_database_error(self, mock_db_session):
        mock_db_session.execute.side_effect = OperationalError("UPDATE", {}, Exception("locked"))

        with pytest.raises(DatabaseError) as exc_info:
            await self.service.update_note(mock_db_session, 1, NoteUpdate(title="New"))

        assert exc_info.value.context["fields"] == ["title"]


class TestNoteServiceDelete:
    """Tests for delete_note."""

    def setup_method(self):
        self.service = NoteService()

    @pytest.mark.asyncio
    async def test_delete_reports_success(self, mock_db_session):
        mock_db_session.execute.return_value = MagicMock(rowcount=1)

        result = await self.service.delete_note(mock_db_session, 1)

        assert result.success is True

    @pytest.mark.asyncio
    async def test_delete_missing_still_succeeds(self, mock_db_session):
        mock_db_session.execute.return_value = MagicMock(rowcount=0)

        result = await self.service.delete_note(mock_db_session, 999)

        assert result.success is True

    @pytest.mark.asyncio
    async def test_delete_database_error(self, mock_db_session):
        mock_db_session.execute.side_effect = OperationalError("DELETE", {}, Exception("down"))

        with pytest.raises(DatabaseError):
            await self.service.delete_note(mock_db_session, 1)
