"""
Authentication schemas.
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class SignupRequest(BaseModel):
    """User registration request schema."""

    name: str = Field(min_length=1, max_length=100, description="Display name")
    email: EmailStr = Field(description="Unique email address")
    password: str = Field(min_length=6, max_length=128, description="User password")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if not v.strip():
            raise ValueError("Name cannot be blank")
        return v.strip()

    model_config = ConfigDict(
        json_schema_extra={
            "example": {"name": "Ada", "email": "ada@example.com", "password": "s3cret-pass"}
        }
    )


class LoginRequest(BaseModel):
    """User login request schema."""

    email: EmailStr = Field(description="Account email")
    password: str = Field(min_length=1, max_length=128, description="User password")


class UserResponse(BaseModel):
    """User information response schema."""

    id: uuid.UUID = Field(description="User unique identifier")
    name: str = Field(description="Display name")
    email: str = Field(description="Email address")
    role: str = Field(description="Account role")
    created_at: datetime = Field(description="Account creation timestamp")

    model_config = ConfigDict(from_attributes=True)


class TokenResponse(BaseModel):
    """JWT token response schema."""

    access_token: str = Field(description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")
    expires_in: int = Field(description="Token expiration time in seconds")
    user: UserResponse = Field(description="User information")
