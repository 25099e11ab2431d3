"""
Service interfaces for NoteSync application.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
from uuid import UUID

from ..schemas.activity import ActivityResponse
from ..schemas.auth import LoginRequest, SignupRequest, TokenResponse, UserResponse
from ..schemas.common import HealthCheckResponse
from ..schemas.notes import (
    CollaboratorResponse,
    NoteCreate,
    NoteResponse,
    NoteUpdate,
    PinResponse,
    SharedNoteResponse,
    ShareTokenResponse,
)
from ..schemas.sharing import CollaboratorRequest


class IAuthService(ABC):
    """Auth service for user management."""

    @abstractmethod
    async def signup(self, request: SignupRequest) -> TokenResponse:
        """Register new user and sign them in."""

    @abstractmethod
    async def login(self, request: LoginRequest) -> TokenResponse:
        """Login user and return a JWT."""

    @abstractmethod
    async def get_current_user(self, user_id: UUID) -> UserResponse:
        """Get user by ID."""

    @abstractmethod
    async def logout(self, access_token: str) -> bool:
        """Revoke the presented token."""


class INoteService(ABC):
    """Note service for CRUD operations."""

    @abstractmethod
    async def list_notes(self, user_id: UUID) -> List[NoteResponse]:
        """Owned and collaborated notes, pinned first."""

    @abstractmethod
    async def search_notes(self, user_id: UUID, query: str) -> List[NoteResponse]:
        """Visible notes matching a substring."""

    @abstractmethod
    async def get_note(self, note_id: UUID, user_id: UUID) -> NoteResponse:
        """Get note by ID with its collaborators."""

    @abstractmethod
    async def create_note(self, user_id: UUID, request: NoteCreate) -> NoteResponse:
        """Create new note."""

    @abstractmethod
    async def update_note(self, note_id: UUID, user_id: UUID, request: NoteUpdate) -> NoteResponse:
        """Partially update a note."""

    @abstractmethod
    async def delete_note(self, note_id: UUID, user_id: UUID) -> None:
        """Delete a note and its grants."""

    @abstractmethod
    async def toggle_pin(self, note_id: UUID, user_id: UUID) -> PinResponse:
        """Flip the pinned flag."""

    @abstractmethod
    async def get_shared_note(self, token: str) -> SharedNoteResponse:
        """Public read through a share token."""


class ISharingService(ABC):
    """Share tokens and collaborator grants."""

    @abstractmethod
    async def generate_share_token(self, note_id: UUID, user_id: UUID) -> ShareTokenResponse:
        """Create the note's share token, or return the existing one."""

    @abstractmethod
    async def add_collaborator(
        self, note_id: UUID, user_id: UUID, request: CollaboratorRequest
    ) -> CollaboratorResponse:
        """Grant or change a collaborator's permission."""

    @abstractmethod
    async def remove_collaborator(self, note_id: UUID, user_id: UUID, collaborator_id: UUID) -> None:
        """Revoke a grant."""


class IActivityService(ABC):
    """Append-only audit trail."""

    @abstractmethod
    async def record(
        self, actor_id: UUID, note_id: Optional[UUID], action: str, details: Any = None
    ) -> None:
        """Append an entry within the caller's unit of work."""

    @abstractmethod
    async def list_for(
        self, note_id: UUID, user_id: UUID, limit: Optional[int] = None
    ) -> List[ActivityResponse]:
        """Newest entries for a note."""


class IHealthService(ABC):
    """Health check service."""

    @abstractmethod
    async def get_health_status(self) -> HealthCheckResponse:
        """Get app health status."""

    @abstractmethod
    async def check_database_health(self) -> Dict[str, Any]:
        """Check DB connection."""

    @abstractmethod
    async def check_redis_health(self) -> Dict[str, Any]:
        """Check Redis connection."""

    @abstractmethod
    def check_collab_health(self) -> Dict[str, Any]:
        """Live connection and presence counts."""
