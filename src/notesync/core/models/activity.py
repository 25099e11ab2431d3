# Append-only audit trail
import uuid
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional

from sqlalchemy import JSON, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import BaseModel
from .types import GUID

if TYPE_CHECKING:
    from .user import User


class ActivityAction(str, Enum):
    """Kinds of recorded actions."""

    SIGNUP = "signup"
    LOGIN = "login"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    PIN = "pin"
    SHARE = "share"
    ADD_COLLABORATOR = "add_collaborator"
    REMOVE_COLLABORATOR = "remove_collaborator"


class ActivityLog(BaseModel):
    """Immutable record of a state-changing action.

    ``note_id`` becomes NULL when the note is deleted so the actor trail
    survives without a dangling reference.
    """

    __tablename__ = "activity_logs"

    # monotonic sequence gives a stable newest-first order
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    user_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    note_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        GUID(), ForeignKey("notes.id", ondelete="SET NULL"), nullable=True
    )
    action: Mapped[str] = mapped_column(String(40), nullable=False)
    details: Mapped[Optional[Any]] = mapped_column(JSON, nullable=True)

    user: Mapped["User"] = relationship("User", lazy="selectin")

    __table_args__ = (
        Index("idx_activity_note_created", "note_id", "created_at"),
        Index("idx_activity_user_id", "user_id"),
    )

    def __repr__(self) -> str:
        return f"<ActivityLog(action={self.action}, note_id={self.note_id}, user_id={self.user_id})>"
