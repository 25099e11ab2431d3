"""Note service implementation."""

from typing import List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ..access import NoteAction, NoteRole, require, resolve_role
from ..errors import InvalidInputError, NotFoundError
from ..logging import get_logger
from ..models.activity import ActivityAction
from ..models.note import Note
from ..repositories import CollaboratorRepository, NoteRepository
from ..schemas.notes import (
    CollaboratorResponse,
    NoteCreate,
    NoteResponse,
    NoteUpdate,
    PinResponse,
    SharedNoteResponse,
)
from .activity_service import ActivityRecorder
from .interfaces import INoteService
from .note_access import load_note_and_role

logger = get_logger("notes")


def note_to_response(
    note: Note,
    role: NoteRole,
    collaborators: Optional[List[CollaboratorResponse]] = None,
) -> NoteResponse:
    """Build the API view of a note for a principal holding ``role``."""
    return NoteResponse(
        id=note.id,
        title=note.title,
        content=note.content,
        tags=note.tags,
        owner_id=note.owner_id,
        owner_name=note.owner.name if note.owner else None,
        is_pinned=note.is_pinned,
        share_token=note.share_token if role is NoteRole.OWNER else None,
        user_permission=role.value,
        collaborators=collaborators,
        created_at=note.created_at,
        updated_at=note.updated_at,
    )


class NoteService(INoteService):
    """Note service implementation."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.note_repo = NoteRepository(session)
        self.collab_repo = CollaboratorRepository(session)
        self.activity = ActivityRecorder(session)

    async def list_notes(self, user_id: UUID) -> List[NoteResponse]:
        """Owned and collaborated notes, pinned first then most recently updated."""
        rows = await self.note_repo.list_visible(user_id)
        return [
            note_to_response(note, resolve_role(note.owner_id, user_id, permission))
            for note, permission in rows
        ]

    async def search_notes(self, user_id: UUID, query: str) -> List[NoteResponse]:
        """Case-insensitive substring search; a blank query matches nothing."""
        rows = await self.note_repo.search_visible(user_id, query)
        return [
            note_to_response(note, resolve_role(note.owner_id, user_id, permission))
            for note, permission in rows
        ]

    async def get_note(self, note_id: UUID, user_id: UUID) -> NoteResponse:
        note, role = await load_note_and_role(self.session, note_id, user_id)
        require(role, NoteAction.READ, "You do not have access to this note")

        grants = await self.collab_repo.list_for_note(note_id)
        collaborators = [
            CollaboratorResponse(
                user_id=grant.user_id,
                name=grant.user.name,
                email=grant.user.email,
                permission=grant.permission,
            )
            for grant in grants
        ]
        return note_to_response(note, role, collaborators)

    async def create_note(self, user_id: UUID, request: NoteCreate) -> NoteResponse:
        """Create new note owned by ``user_id``."""
        if not request.title or not request.title.strip():
            raise InvalidInputError("Title is required")

        note = await self.note_repo.create_note(
            {
                "title": request.title,
                "content": request.content or "",
                "tags": request.tags or "",
                "owner_id": user_id,
            }
        )
        await self.activity.record(user_id, note.id, ActivityAction.CREATE, {"title": note.title})
        await self.session.commit()

        logger.info("Note created", extra={"note_id": str(note.id), "user_id": str(user_id)})
        note = await self.note_repo.get_by_id(note.id)
        return note_to_response(note, NoteRole.OWNER, [])

    async def update_note(self, note_id: UUID, user_id: UUID, request: NoteUpdate) -> NoteResponse:
        """Partial update; fields left out of the request keep their values."""
        note, role = await load_note_and_role(self.session, note_id, user_id)
        require(role, NoteAction.EDIT_CONTENT, "You do not have permission to edit this note")

        changes = request.model_dump(exclude_unset=True, exclude_none=True)
        if "title" in changes and not changes["title"].strip():
            raise InvalidInputError("Title cannot be blank")

        note = await self.note_repo.update_note(note, changes)
        await self.activity.record(
            user_id, note_id, ActivityAction.UPDATE, {"fields": sorted(changes)}
        )
        await self.session.commit()

        note = await self.note_repo.get_by_id(note_id)
        return note_to_response(note, role)

    async def delete_note(self, note_id: UUID, user_id: UUID) -> None:
        """Owner-only delete. The activity entry outlives the note with a null note id."""
        note, role = await load_note_and_role(self.session, note_id, user_id)
        require(role, NoteAction.DELETE, "Only the owner can delete this note")

        await self.activity.record(user_id, note_id, ActivityAction.DELETE, {"title": note.title})
        if not await self.note_repo.delete_note(note_id):
            raise NotFoundError("Note not found", {"note_id": str(note_id)})
        await self.session.commit()

        logger.info("Note deleted", extra={"note_id": str(note_id), "user_id": str(user_id)})

    async def toggle_pin(self, note_id: UUID, user_id: UUID) -> PinResponse:
        _, role = await load_note_and_role(self.session, note_id, user_id)
        require(role, NoteAction.PIN, "Only the owner can pin this note")

        is_pinned = await self.note_repo.toggle_pin(note_id)
        if is_pinned is None:
            raise NotFoundError("Note not found", {"note_id": str(note_id)})
        await self.activity.record(user_id, note_id, ActivityAction.PIN, {"is_pinned": is_pinned})
        await self.session.commit()

        return PinResponse(id=note_id, is_pinned=is_pinned)

    async def get_shared_note(self, token: str) -> SharedNoteResponse:
        """Token-scoped public read; bypasses role checks and hides grants."""
        note = await self.note_repo.get_by_share_token(token)
        if note is None:
            raise NotFoundError("Shared note not found")
        return SharedNoteResponse(
            title=note.title,
            content=note.content,
            tags=note.tags,
            owner_name=note.owner.name if note.owner else None,
            created_at=note.created_at,
            updated_at=note.updated_at,
        )
