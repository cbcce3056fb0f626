"""
User application service — user management for admins and "me" views.

Plaintext passwords are hashed here, before anything reaches the user
service or the database.
"""

import uuid

from bankcards.application.card_app import to_card_page_response
from bankcards.models.user import User
from bankcards.repositories import CardRepository, UserRepository
from bankcards.schemas.card import CardPageResponse
from bankcards.schemas.user import (
    UserCreateRequest,
    UserPageResponse,
    UserResponse,
)
from bankcards.security import hash_password
from bankcards.services import card_service, user_service


async def create_user(user_repository: UserRepository, request: UserCreateRequest) -> UserResponse:
    user = await user_service.create_user(
        user_repository,
        username=request.username,
        hashed_password=hash_password(request.password),
        role=request.role,
    )
    return UserResponse.model_validate(user)


async def get_user(user_repository: UserRepository, user_id: uuid.UUID) -> UserResponse:
    user = await user_service.get_user_by_id(user_repository, user_id)
    return UserResponse.model_validate(user)


async def get_users(user_repository: UserRepository, limit: int, offset: int) -> UserPageResponse:
    page = await user_service.get_users(user_repository, limit=limit, offset=offset)
    return UserPageResponse(
        items=[UserResponse.model_validate(user) for user in page.items],
        total=page.total,
        limit=page.limit,
        offset=page.offset,
    )


async def update_username(
    user_repository: UserRepository,
    user_id: uuid.UUID,
    new_username: str,
) -> UserResponse:
    user = await user_service.get_user_by_id(user_repository, user_id)
    user = await user_service.update_username(user_repository, user, new_username)
    return UserResponse.model_validate(user)


async def update_password(
    user_repository: UserRepository,
    user_id: uuid.UUID,
    new_password: str,
) -> None:
    user = await user_service.get_user_by_id(user_repository, user_id)
    await user_service.update_password(user_repository, user, hash_password(new_password))


async def delete_user(
    user_repository: UserRepository,
    card_repository: CardRepository,
    user_id: uuid.UUID,
) -> None:
    await user_service.delete_user(user_repository, card_repository, user_id)


async def get_own_cards(
    card_repository: CardRepository,
    user: User,
    limit: int,
    offset: int,
) -> CardPageResponse:
    """Cards owned by the caller, whatever their role (an admin gets an empty page)."""
    page = await card_service.get_cards_by_owner(card_repository, user.id, limit=limit, offset=offset)
    return to_card_page_response(page)
