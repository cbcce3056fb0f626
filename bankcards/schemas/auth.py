"""
Pydantic schemas for the login endpoint.

Pydantic validates incoming data automatically: if a required field is
missing or the wrong type, FastAPI returns a 422 error before our code
even runs.
"""

from pydantic import BaseModel, Field

from bankcards.models.user import Role


class UserLoginRequest(BaseModel):
    """Request body for POST /auth/login."""
    username: str = Field(min_length=2, max_length=20)
    password: str = Field(min_length=3, max_length=64)


class LoginResponse(BaseModel):
    """Response body for a successful login, contains the JWT."""
    username: str
    role: Role
    token: str
    token_type: str = "bearer"
