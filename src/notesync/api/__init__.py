"""API routers for NoteSync."""

from .auth import router as auth_router
from .collab import router as collab_router
from .health import router as health_router
from .notes import router as notes_router

__all__ = ["auth_router", "notes_router", "health_router", "collab_router"]
