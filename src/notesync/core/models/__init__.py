"""
Database models for NoteSync.

Models included:
    - User: account with email/password authentication
    - Note: shared document owned by exactly one user
    - Collaborator: per-note editor/viewer grant
    - ActivityLog: append-only audit entry
"""

from .activity import ActivityLog
from .base import BaseModel
from .collaborator import Collaborator
from .note import Note
from .user import User

__all__ = [
    "BaseModel",
    "User",
    "Note",
    "Collaborator",
    "ActivityLog",
]
