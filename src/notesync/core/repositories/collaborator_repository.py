"""Collaborator grant repository."""

from typing import List, Optional
from uuid import UUID

from sqlalchemy import and_, delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..models.collaborator import Collaborator


class CollaboratorRepository:
    """Repository for (note, user) permission grants."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_grant(self, note_id: UUID, user_id: UUID) -> Optional[Collaborator]:
        """Get the grant for one (note, user) pair."""
        stmt = select(Collaborator).where(
            and_(Collaborator.note_id == note_id, Collaborator.user_id == user_id)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_permission(self, note_id: UUID, user_id: UUID) -> Optional[str]:
        """Get just the permission level, or None without a grant."""
        stmt = select(Collaborator.permission).where(
            and_(Collaborator.note_id == note_id, Collaborator.user_id == user_id)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_for_note(self, note_id: UUID) -> List[Collaborator]:
        """List grants on a note with their users loaded."""
        stmt = (
            select(Collaborator)
            .options(selectinload(Collaborator.user))
            .where(Collaborator.note_id == note_id)
            .order_by(Collaborator.created_at, Collaborator.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars())

    async def upsert(self, note_id: UUID, user_id: UUID, permission: str) -> Collaborator:
        """Insert a grant or replace the permission of the existing one."""
        grant = await self.get_grant(note_id, user_id)
        if grant is None:
            grant = Collaborator(note_id=note_id, user_id=user_id, permission=permission)
            self.session.add(grant)
        else:
            grant.permission = permission
        await self.session.flush()
        return grant

    async def remove(self, note_id: UUID, user_id: UUID) -> bool:
        """Delete a grant. Returns False when there was none."""
        stmt = delete(Collaborator).where(
            and_(Collaborator.note_id == note_id, Collaborator.user_id == user_id)
        )
        result = await self.session.execute(stmt)
        return result.rowcount > 0
