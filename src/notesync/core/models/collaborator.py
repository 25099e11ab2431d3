# Per-note collaborator grants
import uuid
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import BaseModel
from .types import GUID

if TYPE_CHECKING:
    from .user import User


class Collaborator(BaseModel):
    """Grant of ``editor`` or ``viewer`` permission on one note to one user.

    The note's owner never has a row here.
    """

    __tablename__ = "collaborators"

    note_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("notes.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    permission: Mapped[str] = mapped_column(String(20), default="viewer", nullable=False)

    user: Mapped["User"] = relationship("User", lazy="selectin")

    __table_args__ = (
        UniqueConstraint("note_id", "user_id", name="uq_collaborators_note_user"),
        CheckConstraint("permission IN ('editor', 'viewer')", name="ck_collaborators_permission"),
        Index("idx_collaborators_note_id", "note_id"),
        Index("idx_collaborators_user_id", "user_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<Collaborator(note_id={self.note_id}, user_id={self.user_id}, "
            f"permission={self.permission})>"
        )
