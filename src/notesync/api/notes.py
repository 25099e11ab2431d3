"""Notes API endpoints."""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.schemas.activity import ActivityResponse
from ..core.schemas.notes import (
    CollaboratorResponse,
    NoteCreate,
    NoteResponse,
    NoteUpdate,
    PinResponse,
    SharedNoteResponse,
    ShareTokenResponse,
)
from ..core.schemas.sharing import CollaboratorRequest
from ..core.services import ActivityRecorder, NoteService, SharingService
from ..database import get_db_session
from ..middleware.auth import get_current_user_id

router = APIRouter(prefix="/notes", tags=["notes"])


@router.get("", response_model=List[NoteResponse])
async def list_notes(
    current_user_id: UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Notes the user owns or collaborates on, pinned first."""
    note_service = NoteService(session)
    return await note_service.list_notes(current_user_id)


# literal paths go before /{note_id}


@router.get("/search", response_model=List[NoteResponse])
async def search_notes(
    q: str = Query("", max_length=200),
    current_user_id: UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Substring search over title, content and tags."""
    note_service = NoteService(session)
    return await note_service.search_notes(current_user_id, q)


@router.get("/shared/{token}", response_model=SharedNoteResponse)
async def get_shared_note(token: str, session: AsyncSession = Depends(get_db_session)):
    """Public read through a share token; no authentication."""
    note_service = NoteService(session)
    return await note_service.get_shared_note(token)


@router.post("", response_model=NoteResponse, status_code=status.HTTP_201_CREATED)
async def create_note(
    request: NoteCreate,
    current_user_id: UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Create a new note."""
    note_service = NoteService(session)
    return await note_service.create_note(current_user_id, request)


@router.get("/{note_id}", response_model=NoteResponse)
async def get_note(
    note_id: UUID,
    current_user_id: UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Get a note with its collaborators."""
    note_service = NoteService(session)
    return await note_service.get_note(note_id, current_user_id)


@router.put("/{note_id}", response_model=NoteResponse)
async def update_note(
    note_id: UUID,
    request: NoteUpdate,
    current_user_id: UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Update a note; omitted fields are left alone."""
    note_service = NoteService(session)
    return await note_service.update_note(note_id, current_user_id, request)


@router.delete("/{note_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_note(
    note_id: UUID,
    current_user_id: UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Delete a note."""
    note_service = NoteService(session)
    await note_service.delete_note(note_id, current_user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/{note_id}/pin", response_model=PinResponse)
async def toggle_pin(
    note_id: UUID,
    current_user_id: UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    note_service = NoteService(session)
    return await note_service.toggle_pin(note_id, current_user_id)


@router.post("/{note_id}/share", response_model=ShareTokenResponse)
async def share_note(
    note_id: UUID,
    current_user_id: UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Get the note's public share token, creating it on first use."""
    sharing_service = SharingService(session)
    return await sharing_service.generate_share_token(note_id, current_user_id)


@router.post(
    "/{note_id}/collaborators",
    response_model=CollaboratorResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_collaborator(
    note_id: UUID,
    request: CollaboratorRequest,
    current_user_id: UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Add a collaborator, or change the permission of an existing one."""
    sharing_service = SharingService(session)
    return await sharing_service.add_collaborator(note_id, current_user_id, request)


@router.delete("/{note_id}/collaborators/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_collaborator(
    note_id: UUID,
    user_id: UUID,
    current_user_id: UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    sharing_service = SharingService(session)
    await sharing_service.remove_collaborator(note_id, current_user_id, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{note_id}/activity", response_model=List[ActivityResponse])
async def list_activity(
    note_id: UUID,
    limit: Optional[int] = Query(None, ge=1),
    current_user_id: UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Newest activity entries for a note."""
    recorder = ActivityRecorder(session)
    return await recorder.list_for(note_id, current_user_id, limit)
