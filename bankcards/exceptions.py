"""
Custom exception classes and FastAPI exception handlers.

Services, validators and the crypto layer raise these domain errors without
importing any HTTP concepts. The handlers registered here translate them
into consistent JSON responses: {"detail", "error_type", "path"}.

Exception hierarchy:
    BankCardsError (base for business errors)
    ├── NotFoundError              — no entity for the identifier (404)
    │   ├── CardNotFoundError
    │   └── UserNotFoundError
    ├── AlreadyExistsError         — uniqueness violation (409)
    │   ├── CardAlreadyExistsError
    │   └── UserAlreadyExistsError
    ├── DataNotValidError          — invalid data caught by the domain (400)
    │   └── CardDataNotValidError
    ├── OperationNotAllowedError   — state machine / balance precondition (400)
    │   ├── CardOperationNotAllowedError
    │   ├── UserOperationNotAllowedError
    │   └── TransferNotAllowedError
    ├── AccessDeniedError          — acting identity lacks rights (403)
    │   └── CardAccessDeniedError
    └── InvalidCredentialsError    — failed login (401)

    CryptoError (fatal, NOT a business error, never retried)
    ├── CryptoUnavailableError     — cryptographic primitive unusable
    └── DataCorruptionError        — stored ciphertext cannot be decrypted
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from bankcards.logging_config import get_logger

logger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Base exception
# ---------------------------------------------------------------------------

class BankCardsError(Exception):
    """Base exception for all Bank Cards API business errors."""

    status_code = 400
    error_type = "bad_request"

    def __init__(self, detail: str = "An error occurred"):
        self.detail = detail
        super().__init__(self.detail)


# ---------------------------------------------------------------------------
# Error kinds
# ---------------------------------------------------------------------------

class NotFoundError(BankCardsError):
    """Raised when an entity is absent for the given identifier."""

    status_code = 404
    error_type = "not_found"


class AlreadyExistsError(BankCardsError):
    """Raised on a uniqueness violation."""

    status_code = 409
    error_type = "already_exists"


class DataNotValidError(BankCardsError):
    """Raised when data that slipped past request validation is invalid."""

    status_code = 400
    error_type = "data_not_valid"


class OperationNotAllowedError(BankCardsError):
    """Raised when a state-machine or balance precondition fails."""

    status_code = 400
    error_type = "operation_not_allowed"


class AccessDeniedError(BankCardsError):
    """Raised when the acting user has no rights over the resource."""

    status_code = 403
    error_type = "access_denied"

    def __init__(self, detail: str = "You do not have access to this resource"):
        super().__init__(detail)


# ---------------------------------------------------------------------------
# Domain exceptions
# ---------------------------------------------------------------------------

class CardNotFoundError(NotFoundError):
    error_type = "card_not_found"


class UserNotFoundError(NotFoundError):
    error_type = "user_not_found"


class CardAlreadyExistsError(AlreadyExistsError):
    error_type = "card_already_exists"


class UserAlreadyExistsError(AlreadyExistsError):
    error_type = "user_already_exists"


class CardDataNotValidError(DataNotValidError):
    error_type = "card_data_not_valid"


class CardOperationNotAllowedError(OperationNotAllowedError):
    error_type = "card_operation_not_allowed"


class UserOperationNotAllowedError(OperationNotAllowedError):
    error_type = "user_operation_not_allowed"


class TransferNotAllowedError(OperationNotAllowedError):
    """Raised by the transfer validator; the message names the failed check."""

    error_type = "transfer_not_allowed"


class CardAccessDeniedError(AccessDeniedError):
    error_type = "card_access_denied"


class InvalidCredentialsError(BankCardsError):
    """Raised when login credentials are incorrect."""

    status_code = 401
    error_type = "invalid_credentials"

    def __init__(self):
        super().__init__("Invalid username or password")


# ---------------------------------------------------------------------------
# Fatal crypto errors
# ---------------------------------------------------------------------------

class CryptoError(Exception):
    """Base for fatal cryptographic failures. Never shown to end users."""


class CryptoUnavailableError(CryptoError):
    """The HMAC or cipher primitive could not be initialized or used."""


class DataCorruptionError(CryptoError):
    """A stored card number ciphertext is malformed or was tampered with."""


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------

def register_exception_handlers(app: FastAPI) -> None:
    """
    Register custom exception handlers with the FastAPI application.

    Every business error maps to its class-level status code. Fatal crypto
    errors are logged with their traceback and answered with a generic 500.

    This is called once during app startup in main.py.
    """

    @app.exception_handler(BankCardsError)
    async def bank_cards_error_handler(
        request: Request, exc: BankCardsError
    ) -> JSONResponse:
        logger.warning(
            "request_rejected",
            path=request.url.path,
            error_type=exc.error_type,
            detail=exc.detail,
        )
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "detail": exc.detail,
                "error_type": exc.error_type,
                "path": request.url.path,
            },
        )

    @app.exception_handler(CryptoError)
    async def crypto_error_handler(
        request: Request, exc: CryptoError
    ) -> JSONResponse:
        logger.error(
            "crypto_failure",
            path=request.url.path,
            error=type(exc).__name__,
            exc_info=exc,
        )
        return JSONResponse(
            status_code=500,
            content={
                "detail": "An unexpected error occurred",
                "error_type": "internal_error",
                "path": request.url.path,
            },
        )
