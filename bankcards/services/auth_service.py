"""
Authentication service — login and bootstrap of the first admin account.

Login flow:
  1. Look up user by username
  2. Verify password against the stored Argon2 hash
  3. Return a JWT whose subject is the user id and which carries the role

Security notes:
  - Login returns the same error for "wrong password" and "unknown user"
    to prevent user enumeration
  - JWT tokens are stateless; no server-side session storage
"""

from bankcards.exceptions import InvalidCredentialsError
from bankcards.logging_config import get_logger
from bankcards.models.user import Role, User
from bankcards.repositories import UserRepository
from bankcards.security import create_access_token, hash_password, verify_password
from bankcards.services import user_service

logger = get_logger(__name__)


async def login(
    user_repository: UserRepository,
    username: str,
    password: str,
) -> tuple[User, str]:
    """
    Authenticate a user and return a JWT token.

    Returns:
        Tuple of (User instance, JWT token string).

    Raises:
        InvalidCredentialsError: If the username is unknown or the password is wrong.
    """
    user = await user_repository.find_by_username(username)

    if user is None or not verify_password(password, user.hashed_password):
        logger.warning("login_failed", username=username)
        raise InvalidCredentialsError()

    token = create_access_token(data={"sub": str(user.id), "role": user.role.value})
    logger.info("login_succeeded", username=username)
    return user, token


async def ensure_admin(
    user_repository: UserRepository,
    username: str,
    password: str,
) -> User | None:
    """
    Create an ADMIN user with the given credentials unless the name is taken.

    Used once at startup so a fresh deployment has someone who can create
    the other users. Returns the new admin, or None if nothing was created.
    """
    if await user_repository.exists_by_username(username):
        return None
    return await user_service.create_user(
        user_repository,
        username=username,
        hashed_password=hash_password(password),
        role=Role.ADMIN,
    )
