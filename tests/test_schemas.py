"""
QuickNotes — Schema Tests
===========================

What:  Validation rules and wire format of the note schemas.
"""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from quicknotes.schemas.note import (
    NoteCreate,
    NoteResponse,
    NoteUpdate,
    NoteUpdateRequest,
)


class TestNoteCreate:

    def test_title_is_trimmed(self):
        assert NoteCreate(title="  Groceries ").title == "Groceries"

    def test_blank_title_rejected(self):
        with pytest.raises(ValidationError, match="title must not be empty"):
            NoteCreate(title="   ")

    def test_length_limit_applies_after_trimming(self):
        assert NoteCreate(title="  " + "x" * 255 + "  ").title == "x" * 255
        with pytest.raises(ValidationError, match="at most 255"):
            NoteCreate(title="x" * 256)

    def test_blank_content_becomes_none(self):
        assert NoteCreate(title="t", content="  ").content is None

    def test_content_kept_verbatim(self):
        assert NoteCreate(title="t", content=" Milk\neggs ").content == " Milk\neggs "


class TestNoteUpdate:

    def test_absent_fields_are_not_changes(self):
        assert NoteUpdate().changes() == {}
        assert NoteUpdate(favorite=True).changes() == {"favorite": True}

    def test_explicit_null_content_is_a_change(self):
        assert NoteUpdate.model_validate({"content": None}).changes() == {"content": None}

    def test_all_fields(self):
        update = NoteUpdate.model_validate(
            {"title": " New ", "content": "Body", "favorite": False}
        )
        assert update.changes() == {"title": "New", "content": "Body", "favorite": False}

    @pytest.mark.parametrize("payload", [
        {"title": None},
        {"title": ""},
        {"favorite": None},
    ])
    def test_present_fields_must_be_valid(self, payload):
        with pytest.raises(ValidationError):
            NoteUpdate.model_validate(payload)

    def test_unknown_fields_are_ignored(self):
        update = NoteUpdate.model_validate({"id": 5, "createdAt": "2026-01-01T00:00:00Z"})
        assert update.changes() == {}

    def test_request_defaults_to_empty_updates(self):
        request = NoteUpdateRequest.model_validate({"id": 3})
        assert request.updates.changes() == {}


class TestNoteResponse:

    def test_serializes_created_at_as_camel_case(self):
        note = NoteResponse(
            id=1,
            title="Groceries",
            content="Milk, eggs",
            favorite=False,
            created_at=datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc),
        )

        data = note.model_dump(by_alias=True, mode="json")

        assert data == {
            "id": 1,
            "title": "Groceries",
            "content": "Milk, eggs",
            "favorite": False,
            "createdAt": "2026-10-19T12:00:00Z",
        }

    def test_parses_wire_format(self):
        note = NoteResponse.model_validate(
            {"id": 2, "title": "t", "content": None, "favorite": True,
             "createdAt": "2026-10-19T12:00:00Z"}
        )

        assert note.created_at.year == 2026
        assert note.favorite is True

    def test_builds_from_orm_row(self, make_note):
        row = make_note(note_id=4, favorite=True)

        note = NoteResponse.model_validate(row)

        assert note.id == 4
        assert note.favorite is True
        assert note.created_at == row.created_at
