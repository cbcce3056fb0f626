"""User validator — uniqueness and deletion preconditions for users."""

from bankcards.exceptions import UserAlreadyExistsError, UserOperationNotAllowedError
from bankcards.models.user import User
from bankcards.repositories.card_repository import CardRepository
from bankcards.repositories.user_repository import UserRepository


async def validate_for_create(user_repository: UserRepository, user: User) -> None:
    await _validate_username_not_exists(user_repository, user.username)


async def validate_for_update_username(
    user_repository: UserRepository,
    user: User,
    new_username: str,
) -> None:
    if user.username == new_username:
        raise UserOperationNotAllowedError(
            "New username cannot be the same as the current username"
        )
    await _validate_username_not_exists(user_repository, new_username)


async def validate_for_delete(card_repository: CardRepository, user: User) -> None:
    """A user who still owns any card cannot be deleted."""
    if await card_repository.exists_by_owner(user.id):
        raise UserOperationNotAllowedError(
            "User cannot be deleted because they have linked cards"
        )


async def _validate_username_not_exists(user_repository: UserRepository, username: str) -> None:
    if await user_repository.exists_by_username(username):
        raise UserAlreadyExistsError(f"User '{username}' already exists")
