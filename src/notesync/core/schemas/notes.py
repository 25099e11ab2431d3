"""
Note management schemas.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class NoteCreate(BaseModel):
    """Note creation request schema."""

    title: str = Field(max_length=200, description="Note title")
    content: str = Field(default="", description="Note content")
    tags: str = Field(default="", max_length=1000, description="Free-text tags")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        if not v.strip():
            raise ValueError("Title is required")
        return v

    model_config = ConfigDict(
        json_schema_extra={
            "example": {"title": "Groceries", "content": "milk", "tags": "home, weekly"}
        }
    )


class NoteUpdate(BaseModel):
    """Partial note update; omitted fields keep their values."""

    title: Optional[str] = Field(default=None, max_length=200, description="Note title")
    content: Optional[str] = Field(default=None, description="Note content")
    tags: Optional[str] = Field(default=None, max_length=1000, description="Free-text tags")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        if v is not None and not v.strip():
            raise ValueError("Title cannot be blank")
        return v


class CollaboratorResponse(BaseModel):
    """A collaborator grant as seen by principals who can read the note."""

    user_id: uuid.UUID
    name: str
    email: str
    permission: str


class NoteResponse(BaseModel):
    """Note response schema."""

    id: uuid.UUID = Field(description="Note unique identifier")
    title: str
    content: str
    tags: str
    owner_id: uuid.UUID
    owner_name: Optional[str] = None
    is_pinned: bool
    share_token: Optional[str] = Field(default=None, description="Only shown to the owner")
    user_permission: str = Field(description="Caller's role: owner, editor or viewer")
    collaborators: Optional[List[CollaboratorResponse]] = None
    created_at: datetime
    updated_at: datetime


class PinResponse(BaseModel):
    """Result of toggling a note's pinned flag."""

    id: uuid.UUID
    is_pinned: bool


class SharedNoteResponse(BaseModel):
    """Public view of a note reached through its share token.

    Deliberately carries no ids, grants or edit affordances.
    """

    title: str
    content: str
    tags: str
    owner_name: Optional[str]
    created_at: datetime
    updated_at: datetime


class ShareTokenResponse(BaseModel):
    """Share token for a note."""

    note_id: uuid.UUID
    share_token: str
