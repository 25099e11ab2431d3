"""Activity log repository. Entries are only ever inserted and read."""

from typing import List, Optional
from uuid import UUID

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..models.activity import ActivityLog


class ActivityRepository:
    """Repository for the append-only audit trail."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def append(
        self, user_id: UUID, note_id: Optional[UUID], action: str, details=None
    ) -> ActivityLog:
        entry = ActivityLog(user_id=user_id, note_id=note_id, action=action, details=details)
        self.session.add(entry)
        await self.session.flush()
        return entry

    async def list_for_note(self, note_id: UUID, limit: int) -> List[ActivityLog]:
        """Most recent entries for a note, newest first."""
        stmt = (
            select(ActivityLog)
            .options(selectinload(ActivityLog.user))
            .where(ActivityLog.note_id == note_id)
            .order_by(desc(ActivityLog.created_at), desc(ActivityLog.id))
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars())
