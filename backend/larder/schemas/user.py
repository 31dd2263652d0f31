"""User Schemas — public user shapes and admin write payloads."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from larder.core.domain_types import Role


class UserSummary(BaseModel):
    """Embedded user reference (creator, share list)."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    email: str


class UserResponse(UserSummary):
    role: Role
    created_at: datetime


class UserCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    email: str = Field(
        max_length=320, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$",
    )
    role: Role = Role.STAFF

    @field_validator("name", "email", mode="before")
    @classmethod
    def strip_text(cls, v):
        if not isinstance(v, str):
            return v
        v = v.strip()
        if not v:
            raise ValueError("cannot be empty or whitespace")
        return v

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: str) -> str:
        return v.lower()


class RoleUpdate(BaseModel):
    role: Role
