"""
User service — user creation, lookup, rename, password change and deletion.

Passwords arrive here already hashed; this module never sees plaintext.
"""

import uuid

from bankcards.exceptions import UserNotFoundError
from bankcards.logging_config import get_logger
from bankcards.models.user import Role, User
from bankcards.repositories import CardRepository, Page, UserRepository
from bankcards.validators import user_validator

logger = get_logger(__name__)


async def create_user(
    user_repository: UserRepository,
    username: str,
    hashed_password: str,
    role: Role,
) -> User:
    """
    Create a new user.

    Raises:
        UserAlreadyExistsError: If the username is taken.
    """
    user = User(username=username, hashed_password=hashed_password, role=role)
    await user_validator.validate_for_create(user_repository, user)
    user = await user_repository.save(user)
    logger.info("user_created", user_id=str(user.id), username=username, role=role.value)
    return user


async def get_user_by_id(user_repository: UserRepository, user_id: uuid.UUID) -> User:
    user = await user_repository.find_by_id(user_id)
    if user is None:
        raise UserNotFoundError(f"User with id {user_id} not found")
    return user


async def get_user_by_username(user_repository: UserRepository, username: str) -> User:
    user = await user_repository.find_by_username(username)
    if user is None:
        raise UserNotFoundError(f'User with username "{username}" not found')
    return user


async def get_users(user_repository: UserRepository, limit: int = 20, offset: int = 0) -> Page[User]:
    return await user_repository.find_all(limit=limit, offset=offset)


async def update_username(
    user_repository: UserRepository,
    user: User,
    new_username: str,
) -> User:
    """
    Rename a user.

    Raises:
        UserOperationNotAllowedError: If the new name equals the current one.
        UserAlreadyExistsError: If another user already has the new name.
    """
    await user_validator.validate_for_update_username(user_repository, user, new_username)
    user.username = new_username
    return await user_repository.save(user)


async def update_password(
    user_repository: UserRepository,
    user: User,
    new_hashed_password: str,
) -> User:
    user.hashed_password = new_hashed_password
    return await user_repository.save(user)


async def delete_user(
    user_repository: UserRepository,
    card_repository: CardRepository,
    user_id: uuid.UUID,
) -> None:
    """
    Delete a user who owns no cards.

    Raises:
        UserNotFoundError: If the user does not exist.
        UserOperationNotAllowedError: If the user still owns a card.
    """
    user = await get_user_by_id(user_repository, user_id)
    await user_validator.validate_for_delete(card_repository, user)
    await user_repository.delete(user)
    logger.info("user_deleted", user_id=str(user_id))
