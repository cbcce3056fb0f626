"""
Users router — user management (admin) and the caller's own profile.

Endpoints:
  POST   /users                — [ADMIN] Create a user
  GET    /users                — [ADMIN] List users
  GET    /users/me             — The authenticated user
  GET    /users/me/cards       — Cards owned by the authenticated user
  GET    /users/{id}           — [ADMIN] Get a user
  PATCH  /users/{id}           — [ADMIN] Rename a user
  PATCH  /users/{id}/password  — [ADMIN] Set a new password
  DELETE /users/{id}           — [ADMIN] Delete a user who owns no cards

The /me routes are declared before /{user_id} so "me" is never parsed
as an id.
"""

import uuid

from fastapi import APIRouter, Depends, Query, status

from bankcards.application import user_app
from bankcards.dependencies import (
    get_card_repository,
    get_current_user,
    get_user_repository,
    require_admin,
)
from bankcards.models.user import User
from bankcards.repositories import CardRepository, UserRepository
from bankcards.schemas.card import CardPageResponse
from bankcards.schemas.user import (
    UserCreateRequest,
    UserPageResponse,
    UserPasswordUpdateRequest,
    UserResponse,
    UserUpdateRequest,
)

router = APIRouter()


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a user",
)
async def create_user(
    request: UserCreateRequest,
    admin: User = Depends(require_admin),
    user_repository: UserRepository = Depends(get_user_repository),
):
    """
    Create a new user.

    - **username**: 2-20 characters (letters, digits, "_", ".", "-"), unique
    - **password**: 3-64 characters
    - **role**: USER or ADMIN
    """
    return await user_app.create_user(user_repository, request)


@router.get(
    "",
    response_model=UserPageResponse,
    summary="List users",
)
async def list_users(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    admin: User = Depends(require_admin),
    user_repository: UserRepository = Depends(get_user_repository),
):
    return await user_app.get_users(user_repository, limit=limit, offset=offset)


@router.get(
    "/me",
    response_model=UserResponse,
    summary="Get the current user",
)
async def get_me(user: User = Depends(get_current_user)):
    return user


@router.get(
    "/me/cards",
    response_model=CardPageResponse,
    summary="List my cards",
)
async def get_my_cards(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    user: User = Depends(get_current_user),
    card_repository: CardRepository = Depends(get_card_repository),
):
    return await user_app.get_own_cards(card_repository, user, limit=limit, offset=offset)


@router.get(
    "/{user_id}",
    response_model=UserResponse,
    summary="Get a user",
)
async def get_user(
    user_id: uuid.UUID,
    admin: User = Depends(require_admin),
    user_repository: UserRepository = Depends(get_user_repository),
):
    return await user_app.get_user(user_repository, user_id)


@router.patch(
    "/{user_id}",
    response_model=UserResponse,
    summary="Rename a user",
)
async def update_username(
    user_id: uuid.UUID,
    request: UserUpdateRequest,
    admin: User = Depends(require_admin),
    user_repository: UserRepository = Depends(get_user_repository),
):
    """The new username must differ from the current one and be free."""
    return await user_app.update_username(user_repository, user_id, request.new_username)


@router.patch(
    "/{user_id}/password",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Set a user's password",
)
async def update_password(
    user_id: uuid.UUID,
    request: UserPasswordUpdateRequest,
    admin: User = Depends(require_admin),
    user_repository: UserRepository = Depends(get_user_repository),
):
    await user_app.update_password(user_repository, user_id, request.new_password)


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a user",
)
async def delete_user(
    user_id: uuid.UUID,
    admin: User = Depends(require_admin),
    user_repository: UserRepository = Depends(get_user_repository),
    card_repository: CardRepository = Depends(get_card_repository),
):
    """A user who still owns any card cannot be deleted."""
    await user_app.delete_user(user_repository, card_repository, user_id)
