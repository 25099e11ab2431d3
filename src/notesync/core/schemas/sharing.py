"""
Collaborator grant schemas.
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class CollaboratorRequest(BaseModel):
    """Add or change a collaborator on a note."""

    email: EmailStr = Field(description="Email of the user to add")
    permission: str = Field(description="'editor' or 'viewer'")

    @field_validator("permission")
    @classmethod
    def normalize_permission(cls, v):
        # membership is checked in the service so the error follows the taxonomy
        return v.strip().lower()

    model_config = ConfigDict(
        json_schema_extra={"example": {"email": "eve@example.com", "permission": "editor"}}
    )
