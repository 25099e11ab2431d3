"""
Access control for notes.

Every permission decision in the service goes through this module, whether
the caller is a REST handler or the live collaboration session. Decisions are
plain booleans; callers that need a failure use :func:`require`.

Precedence:
    1. the owner may do everything
    2. an ``editor`` collaborator may read and edit content
    3. a ``viewer`` collaborator may read
    4. anyone else is denied (token reads bypass this module entirely)

Both collaborator levels may view the activity timeline.
"""

from enum import Enum
from typing import Optional
from uuid import UUID

from .errors import ForbiddenError


class NoteAction(str, Enum):
    """Actions a principal can request on a note."""

    READ = "read"
    EDIT_CONTENT = "edit-content"
    DELETE = "delete"
    PIN = "pin"
    SHARE = "share"
    MANAGE_COLLABORATORS = "manage-collaborators"
    VIEW_ACTIVITY = "view-activity"


class Permission(str, Enum):
    """Collaborator grant levels."""

    EDITOR = "editor"
    VIEWER = "viewer"


class NoteRole(str, Enum):
    """Effective role of a principal on a note."""

    OWNER = "owner"
    EDITOR = "editor"
    VIEWER = "viewer"
    NONE = "none"


_ALLOWED = {
    NoteRole.OWNER: frozenset(NoteAction),
    NoteRole.EDITOR: frozenset(
        {NoteAction.READ, NoteAction.EDIT_CONTENT, NoteAction.VIEW_ACTIVITY}
    ),
    NoteRole.VIEWER: frozenset({NoteAction.READ, NoteAction.VIEW_ACTIVITY}),
    NoteRole.NONE: frozenset(),
}


def resolve_role(
    owner_id: UUID, user_id: Optional[UUID], permission: Optional[str] = None
) -> NoteRole:
    """Work out a principal's role from ownership and its grant (if any).

    Ownership is checked first and independently of the grant table.
    Unknown permission strings resolve to no role.
    """
    if user_id is None:
        return NoteRole.NONE
    if owner_id == user_id:
        return NoteRole.OWNER
    if permission == Permission.EDITOR.value:
        return NoteRole.EDITOR
    if permission == Permission.VIEWER.value:
        return NoteRole.VIEWER
    return NoteRole.NONE


def role_allows(role: NoteRole, action: NoteAction) -> bool:
    return action in _ALLOWED[role]


def can(
    owner_id: UUID,
    user_id: Optional[UUID],
    permission: Optional[str],
    action: NoteAction,
) -> bool:
    """Decide whether ``user_id`` may perform ``action``."""
    return role_allows(resolve_role(owner_id, user_id, permission), action)


def require(role: NoteRole, action: NoteAction, message: Optional[str] = None) -> None:
    """Raise ForbiddenError unless ``role`` allows ``action``."""
    if not role_allows(role, action):
        raise ForbiddenError(message or f"Not allowed to {action.value} this note")
