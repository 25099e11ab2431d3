"""
Pydantic schemas for validating and documenting API requests and responses.

This package exposes the Pydantic models used across the application to
define input/output contracts for authentication, notes, collaborator grants,
the activity timeline, collaboration frames and common responses.
"""

from .activity import ActivityResponse
from .auth import LoginRequest, SignupRequest, TokenResponse, UserResponse
from .common import ErrorResponse, HealthCheckResponse, MessageResponse
from .notes import (
    CollaboratorResponse,
    NoteCreate,
    NoteResponse,
    NoteUpdate,
    PinResponse,
    SharedNoteResponse,
    ShareTokenResponse,
)
from .sharing import CollaboratorRequest

__all__ = [
    # Auth schemas
    "LoginRequest",
    "SignupRequest",
    "TokenResponse",
    "UserResponse",
    # Note schemas
    "NoteCreate",
    "NoteUpdate",
    "NoteResponse",
    "PinResponse",
    "SharedNoteResponse",
    "ShareTokenResponse",
    # Collaborator schemas
    "CollaboratorRequest",
    "CollaboratorResponse",
    # Activity
    "ActivityResponse",
    # Common schemas
    "ErrorResponse",
    "HealthCheckResponse",
    "MessageResponse",
]
