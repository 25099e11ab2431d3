"""
User model for authentication.
"""

from enum import Enum
from typing import TYPE_CHECKING, List

from sqlalchemy import CheckConstraint, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import BaseModel, UpdatedAtMixin

if TYPE_CHECKING:
    from .note import Note


class UserRole(str, Enum):
    """Account roles (stored only)."""

    USER = "user"
    ADMIN = "admin"


class User(UpdatedAtMixin, BaseModel):
    """User account identified by email."""

    __tablename__ = "users"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(20), default=UserRole.USER.value, nullable=False)

    notes: Mapped[List["Note"]] = relationship(
        "Note",
        back_populates="owner",
        passive_deletes=True,
    )

    __table_args__ = (
        CheckConstraint("length(name) <= 100", name="ck_users_name_len"),
        CheckConstraint("role IN ('user', 'admin')", name="ck_users_role"),
        Index("idx_users_email", "email"),
    )

    def __repr__(self) -> str:
        return f"<User(email='{self.email}')>"
