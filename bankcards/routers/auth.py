"""
Authentication router — the login endpoint.

This is the only public (unauthenticated) endpoint besides /health.
There is no self-service signup: users are created by an admin.

Endpoints:
  POST /auth/login  — Authenticate and get a token

Security audit notes:
  - Plaintext passwords exist only in memory during request processing
    and are never logged; only the username appears in login events.
  - JWT tokens appear only in response bodies, which are not logged.
  - Unknown usernames and wrong passwords produce the same 401 response.
"""

from fastapi import APIRouter, Depends

from bankcards.dependencies import get_user_repository
from bankcards.repositories import UserRepository
from bankcards.schemas.auth import LoginResponse, UserLoginRequest
from bankcards.services import auth_service

router = APIRouter()


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Authenticate and get a token",
)
async def login(
    request: UserLoginRequest,
    user_repository: UserRepository = Depends(get_user_repository),
):
    """
    Authenticate with username and password.

    Returns a JWT bearer token that must be included in the Authorization
    header for all subsequent requests:

        Authorization: Bearer <token>

    The token expires after ACCESS_TOKEN_EXPIRE_MINUTES (default: 30).
    """
    user, token = await auth_service.login(
        user_repository,
        username=request.username,
        password=request.password,
    )
    return LoginResponse(username=user.username, role=user.role, token=token)
