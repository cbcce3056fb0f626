"""
FastAPI dependencies for authentication, authorization and repositories.

Dependency chain:

  get_current_user (JWT -> User)
      ├── require_admin (User -> User)   [ADMIN role]
      └── require_user  (User -> User)   [USER role]

Role-based access control:
  - ADMIN: Manages users and cards (create, activate, delete, owner lookup)
    and can read or block any card. Admins own no cards and cannot transfer.
  - USER: Reads and blocks their own cards and transfers money between them.

The acting identity is resolved here once per request and passed down to
the application layer; nothing below re-derives it.
"""

import uuid

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession

from bankcards.config import settings
from bankcards.database import get_db
from bankcards.models.user import Role, User
from bankcards.repositories import CardRepository, UserRepository
from bankcards.security import decode_access_token


# Reads "Authorization: Bearer <token>"; tokenUrl powers Swagger's Authorize button
oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_PREFIX}/auth/login")


def get_card_repository(db: AsyncSession = Depends(get_db)) -> CardRepository:
    return CardRepository(db)


def get_user_repository(db: AsyncSession = Depends(get_db)) -> UserRepository:
    return UserRepository(db)


async def get_current_user(
    token: str = Depends(oauth2_scheme),
    user_repository: UserRepository = Depends(get_user_repository),
) -> User:
    """
    Extract and validate the JWT token, then return the corresponding User.

    Raises:
        HTTPException 401: If the token is invalid or the user doesn't exist.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        payload = decode_access_token(token)
        user_id_str: str | None = payload.get("sub")
        if user_id_str is None:
            raise credentials_exception
        user_id = uuid.UUID(user_id_str)
    except (JWTError, ValueError):
        raise credentials_exception

    user = await user_repository.find_by_id(user_id)
    if user is None:
        raise credentials_exception

    return user


async def require_admin(user: User = Depends(get_current_user)) -> User:
    """
    Require the authenticated user to have the ADMIN role.

    Raises:
        HTTPException 403: If the user is not an admin.
    """
    if user.role != Role.ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return user


async def require_user(user: User = Depends(get_current_user)) -> User:
    """
    Require the authenticated user to have the USER role.

    Admin accounts own no cards, so card-holder operations such as
    transfers are closed to them.

    Raises:
        HTTPException 403: If the user is an admin.
    """
    if user.role != Role.USER:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Card holder access required",
        )
    return user
