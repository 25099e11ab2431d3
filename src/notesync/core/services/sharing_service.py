"""Sharing service implementation: share tokens and collaborator grants."""

import secrets
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ...config import get_settings
from ..access import NoteAction, Permission, require
from ..errors import InvalidInputError, NotFoundError
from ..logging import get_logger
from ..models.activity import ActivityAction
from ..repositories import CollaboratorRepository, NoteRepository, UserRepository
from ..schemas.notes import CollaboratorResponse, ShareTokenResponse
from ..schemas.sharing import CollaboratorRequest
from .activity_service import ActivityRecorder
from .interfaces import ISharingService
from .note_access import load_note_and_role

logger = get_logger("sharing")

_PERMISSIONS = frozenset(p.value for p in Permission)


class SharingService(ISharingService):
    """Sharing service implementation."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.note_repo = NoteRepository(session)
        self.collab_repo = CollaboratorRepository(session)
        self.user_repo = UserRepository(session)
        self.activity = ActivityRecorder(session)
        self.settings = get_settings()

    async def generate_share_token(self, note_id: UUID, user_id: UUID) -> ShareTokenResponse:
        """Create the share token on first request; later calls return the same one."""
        note, role = await load_note_and_role(self.session, note_id, user_id)
        require(role, NoteAction.SHARE, "Only the owner can share this note")

        if note.share_token:
            return ShareTokenResponse(note_id=note_id, share_token=note.share_token)

        candidate = secrets.token_urlsafe(self.settings.share_token_bytes)
        token, created = await self.note_repo.set_share_token_if_absent(note_id, candidate)
        if token is None:
            raise NotFoundError("Note not found", {"note_id": str(note_id)})
        if created:
            await self.activity.record(user_id, note_id, ActivityAction.SHARE)
            logger.info("Share token created", extra={"note_id": str(note_id)})
        await self.session.commit()

        return ShareTokenResponse(note_id=note_id, share_token=token)

    async def add_collaborator(
        self, note_id: UUID, user_id: UUID, request: CollaboratorRequest
    ) -> CollaboratorResponse:
        """Grant ``editor`` or ``viewer``; an existing grant has its level replaced."""
        _, role = await load_note_and_role(self.session, note_id, user_id)
        require(role, NoteAction.MANAGE_COLLABORATORS, "Only the owner can add collaborators")

        if request.permission not in _PERMISSIONS:
            raise InvalidInputError(
                "Permission must be 'editor' or 'viewer'",
                {"permission": request.permission},
            )

        target = await self.user_repo.get_by_email(request.email)
        if target is None:
            raise NotFoundError("User not found", {"email": request.email})
        if target.id == user_id:
            raise InvalidInputError("Cannot add yourself as a collaborator")

        await self.collab_repo.upsert(note_id, target.id, request.permission)
        await self.activity.record(
            user_id,
            note_id,
            ActivityAction.ADD_COLLABORATOR,
            {"collaborator_id": str(target.id), "permission": request.permission},
        )
        await self.session.commit()

        logger.info(
            "Collaborator granted",
            extra={"note_id": str(note_id), "collaborator_id": str(target.id)},
        )
        return CollaboratorResponse(
            user_id=target.id,
            name=target.name,
            email=target.email,
            permission=request.permission,
        )

    async def remove_collaborator(self, note_id: UUID, user_id: UUID, collaborator_id: UUID) -> None:
        _, role = await load_note_and_role(self.session, note_id, user_id)
        require(role, NoteAction.MANAGE_COLLABORATORS, "Only the owner can remove collaborators")

        if not await self.collab_repo.remove(note_id, collaborator_id):
            raise NotFoundError("Collaborator not found", {"user_id": str(collaborator_id)})
        await self.activity.record(
            user_id,
            note_id,
            ActivityAction.REMOVE_COLLABORATOR,
            {"collaborator_id": str(collaborator_id)},
        )
        await self.session.commit()
