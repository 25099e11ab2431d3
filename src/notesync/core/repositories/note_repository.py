"""Note repository for database operations."""

import logging
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import and_, delete, desc, not_, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.activity import ActivityLog
from ..models.base import utcnow
from ..models.collaborator import Collaborator
from ..models.note import Note

logger = logging.getLogger(__name__)

# fields a note update may touch; everything else is fixed or owner-only
MUTABLE_FIELDS = ("title", "content", "tags")


def _like_pattern(query: str) -> str:
    escaped = query.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class NoteRepository:
    """Repository for note database operations.

    Mutations are flushed but not committed; the calling service commits
    once the matching activity entry has been added.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_note(self, note_data: dict) -> Note:
        """Create new note, unpinned and without a share token."""
        note = Note(**note_data, is_pinned=False, share_token=None)
        self.session.add(note)
        await self.session.flush()
        await self.session.refresh(note)
        return note

    async def get_by_id(self, note_id: UUID) -> Optional[Note]:
        """Get note by ID."""
        stmt = select(Note).where(Note.id == note_id).execution_options(populate_existing=True)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_share_token(self, token: str) -> Optional[Note]:
        """Get note by its public share token."""
        if not token:
            return None
        stmt = select(Note).where(Note.share_token == token)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def update_note(self, note: Note, update_data: dict) -> Note:
        """Apply a partial update; omitted fields keep their values."""
        for key, value in update_data.items():
            if key in MUTABLE_FIELDS and value is not None:
                setattr(note, key, value)
        note.updated_at = utcnow()
        await self.session.flush()
        await self.session.refresh(note)
        return note

    async def delete_note(self, note_id: UUID) -> bool:
        """Delete a note, its grants, and detach its activity entries."""
        await self.session.execute(delete(Collaborator).where(Collaborator.note_id == note_id))
        await self.session.execute(
            update(ActivityLog).where(ActivityLog.note_id == note_id).values(note_id=None)
        )
        result = await self.session.execute(delete(Note).where(Note.id == note_id))
        deleted = result.rowcount > 0
        logger.info(f"Deleted note {note_id}" if deleted else f"Note {note_id} already gone")
        return deleted

    async def toggle_pin(self, note_id: UUID) -> Optional[bool]:
        """Flip the pinned flag without touching ``updated_at``."""
        await self.session.execute(
            update(Note)
            .where(Note.id == note_id)
            .values(is_pinned=not_(Note.is_pinned), updated_at=Note.updated_at)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(select(Note.is_pinned).where(Note.id == note_id))
        return result.scalar_one_or_none()

    async def set_share_token_if_absent(self, note_id: UUID, token: str) -> Tuple[Optional[str], bool]:
        """Store ``token`` unless the note already has one.

        Returns the note's token and whether it was created by this call.
        """
        result = await self.session.execute(
            update(Note)
            .where(and_(Note.id == note_id, Note.share_token.is_(None)))
            .values(share_token=token, updated_at=Note.updated_at)
            .execution_options(synchronize_session=False)
        )
        created = result.rowcount > 0
        current = await self.session.execute(select(Note.share_token).where(Note.id == note_id))
        return current.scalar_one_or_none(), created

    def _visible_stmt(self, user_id: UUID):
        return (
            select(Note, Collaborator.permission)
            .outerjoin(
                Collaborator,
                and_(Collaborator.note_id == Note.id, Collaborator.user_id == user_id),
            )
            .where(or_(Note.owner_id == user_id, Collaborator.user_id == user_id))
            .order_by(desc(Note.is_pinned), desc(Note.updated_at), Note.id)
            .execution_options(populate_existing=True)
        )

    async def list_visible(self, user_id: UUID) -> List[Tuple[Note, Optional[str]]]:
        """Owned and collaborated notes with the caller's grant (None when owned)."""
        result = await self.session.execute(self._visible_stmt(user_id))
        return [(note, permission) for note, permission in result.all()]

    async def search_visible(self, user_id: UUID, query: str) -> List[Tuple[Note, Optional[str]]]:
        """Visible notes whose title, content or tags contain ``query``."""
        if not query or not query.strip():
            return []
        pattern = _like_pattern(query)
        stmt = self._visible_stmt(user_id).where(
            or_(
                Note.title.ilike(pattern, escape="\\"),
                Note.content.ilike(pattern, escape="\\"),
                Note.tags.ilike(pattern, escape="\\"),
            )
        )
        result = await self.session.execute(stmt)
        return [(note, permission) for note, permission in result.all()]
