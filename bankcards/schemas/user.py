"""
Pydantic schemas for User endpoints.

hashed_password is NEVER included in any response schema.
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from bankcards.models.user import Role

USERNAME_PATTERN = r"^[A-Za-z0-9_.-]{2,20}$"


class UserCreateRequest(BaseModel):
    """Request body for POST /users."""
    username: str = Field(pattern=USERNAME_PATTERN)
    password: str = Field(min_length=3, max_length=64)
    role: Role


class UserUpdateRequest(BaseModel):
    """Request body for PATCH /users/{id}."""
    new_username: str = Field(pattern=USERNAME_PATTERN)


class UserPasswordUpdateRequest(BaseModel):
    """Request body for PATCH /users/{id}/password."""
    new_password: str = Field(min_length=4, max_length=64)


class UserResponse(BaseModel):
    """Public representation of a User (never includes the password hash)."""
    id: uuid.UUID
    username: str
    role: Role
    created_at: datetime

    model_config = {"from_attributes": True}


class UserPageResponse(BaseModel):
    """One page of users."""
    items: list[UserResponse]
    total: int
    limit: int
    offset: int
