"""
Service layer interfaces and implementations.

Services own the unit of work: repositories flush, services commit once the
primary mutation and its activity entry are both in place.
"""

from .interfaces import (
    IActivityService,
    IAuthService,
    IHealthService,
    INoteService,
    ISharingService,
)

from .activity_service import ActivityRecorder
from .auth_service import AuthService
from .health_service import HealthService
from .note_service import NoteService
from .sharing_service import SharingService

__all__ = [
    # Interfaces
    "IAuthService",
    "INoteService",
    "ISharingService",
    "IActivityService",
    "IHealthService",

    # Implementations
    "ActivityRecorder",
    "AuthService",
    "NoteService",
    "SharingService",
    "HealthService",
]
