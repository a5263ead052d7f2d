"""Pydantic schemas for login and users."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=50)
    password: str = Field(..., min_length=1, max_length=128)

    @field_validator("username")
    @classmethod
    def normalize_username(cls, v: str) -> str:
        """Usernames are matched case-insensitively."""
        return v.strip().lower()


class UserRead(BaseModel):
    """Schema for reading a user from the database."""

    id: UUID
    username: str
    display_name: str
    is_active: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class LoginResponse(BaseModel):
    user: UserRead
    expires_at: datetime
