"""Activity recorder: writes and reads the per-note audit trail."""

from typing import Any, List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ...config import get_settings
from ..access import NoteAction, require
from ..logging import get_logger
from ..models.activity import ActivityAction
from ..repositories import ActivityRepository
from ..schemas.activity import ActivityResponse
from .interfaces import IActivityService
from .note_access import load_note_and_role

logger = get_logger("activity")


class ActivityRecorder(IActivityService):
    """Appends entries inside the caller's transaction.

    The recorder never commits: the service that performed the mutation
    commits both together, so a failed mutation leaves no entry behind.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.activity_repo = ActivityRepository(session)
        self.settings = get_settings()

    async def record(
        self, actor_id: UUID, note_id: Optional[UUID], action: str, details: Any = None
    ) -> None:
        if isinstance(action, ActivityAction):
            action = action.value
        await self.activity_repo.append(actor_id, note_id, action, details)
        logger.debug(
            "Activity recorded",
            extra={"actor_id": str(actor_id), "note_id": str(note_id), "action": action},
        )

    async def list_for(
        self, note_id: UUID, user_id: UUID, limit: Optional[int] = None
    ) -> List[ActivityResponse]:
        """Most recent entries, newest first, capped at the page size."""
        _, role = await load_note_and_role(self.session, note_id, user_id)
        require(role, NoteAction.VIEW_ACTIVITY, "Not allowed to view this note's activity")

        cap = self.settings.activity_page_size
        limit = cap if limit is None else max(1, min(limit, cap))

        entries = await self.activity_repo.list_for_note(note_id, limit)
        return [
            ActivityResponse(
                id=entry.id,
                user_id=entry.user_id,
                user_name=entry.user.name if entry.user else None,
                note_id=entry.note_id,
                action=entry.action,
                details=entry.details,
                created_at=entry.created_at,
            )
            for entry in entries
        ]
