"""Loading a note together with the caller's role on it."""

from typing import Optional, Tuple
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ..access import NoteRole, resolve_role
from ..errors import NotFoundError
from ..models.note import Note
from ..repositories import CollaboratorRepository, NoteRepository


async def resolve_note_role(
    session: AsyncSession, note_id: UUID, user_id: Optional[UUID]
) -> Tuple[Optional[Note], NoteRole]:
    """Current note and role, or ``(None, NoteRole.NONE)`` when the note is gone."""
    note = await NoteRepository(session).get_by_id(note_id)
    if note is None:
        return None, NoteRole.NONE
    if user_id is None or note.is_owned_by(user_id):
        return note, resolve_role(note.owner_id, user_id)
    permission = await CollaboratorRepository(session).get_permission(note_id, user_id)
    return note, resolve_role(note.owner_id, user_id, permission)


async def load_note_and_role(
    session: AsyncSession, note_id: UUID, user_id: UUID
) -> Tuple[Note, NoteRole]:
    """Like :func:`resolve_note_role` but raises NotFoundError for a missing note."""
    note, role = await resolve_note_role(session, note_id, user_id)
    if note is None:
        raise NotFoundError("Note not found", {"note_id": str(note_id)})
    return note, role
