"""
Unit tests for note and sharing request schemas.
"""

import pytest
from pydantic import ValidationError

from notesync.core.schemas.notes import NoteCreate, NoteUpdate
from notesync.core.schemas.sharing import CollaboratorRequest


class TestNoteSchemas:
    def test_note_create_defaults(self):
        note = NoteCreate(title="Groceries")
        assert note.content == ""
        assert note.tags == ""

    @pytest.mark.parametrize("title", ["", "   "])
    def test_note_create_requires_title(self, title):
        with pytest.raises(ValidationError):
            NoteCreate(title=title)

    def test_note_create_title_length(self):
        with pytest.raises(ValidationError):
            NoteCreate(title="x" * 201)

    def test_note_update_tracks_only_sent_fields(self):
        update = NoteUpdate(content="eggs")
        assert update.model_dump(exclude_unset=True) == {"content": "eggs"}

    def test_note_update_rejects_blank_title(self):
        with pytest.raises(ValidationError):
            NoteUpdate(title=" ")


class TestCollaboratorRequest:
    def test_permission_is_lowercased(self):
        req = CollaboratorRequest(email="ed@example.com", permission="Editor")
        assert req.permission == "editor"

    def test_email_must_be_valid(self):
        with pytest.raises(ValidationError):
            CollaboratorRequest(email="not-an-email", permission="viewer")
