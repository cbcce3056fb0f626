"""
Card validator — preconditions for every card lifecycle operation.

Each check either returns silently or raises a specific business error.
None of them mutate the card, so a failed check leaves no partial change.

Duplicate detection goes through the blind index only:
exists_by_card_number_hash() is a single indexed lookup. Stored
ciphertexts are never decrypted to look for a match.
"""

from datetime import date, datetime, timezone
from decimal import Decimal

from bankcards.exceptions import (
    CardAlreadyExistsError,
    CardDataNotValidError,
    CardOperationNotAllowedError,
)
from bankcards.models.card import Card, CardStatus
from bankcards.models.user import Role, User
from bankcards.repositories.card_repository import CardRepository


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


async def validate_for_create(
    card_repository: CardRepository,
    card: Card,
    owner: User,
    masked_card_number: str,
    today: date | None = None,
) -> None:
    """
    Validate a new card before it is inserted.

    Args:
        card_repository: Used for the blind-index existence check.
        card: The unsaved card (hash and expiry date already set).
        owner: The user the card is issued to.
        masked_card_number: Display form of the number, for the error message.
        today: Reference date (defaults to the current UTC date).

    Raises:
        CardOperationNotAllowedError: If the owner is an ADMIN.
        CardDataNotValidError: If the expiry date is not strictly in the future.
        CardAlreadyExistsError: If a card with the same number hash exists.
    """
    if owner.role == Role.ADMIN:
        raise CardOperationNotAllowedError("Cannot create a card for ADMIN user")

    today = today or utc_today()
    if card.expiry_date <= today:
        raise CardDataNotValidError("Expiration date must be in the future")

    if await card_repository.exists_by_card_number_hash(card.card_number_hash):
        raise CardAlreadyExistsError(f"Card with number {masked_card_number} already exists")


def validate_for_block(card: Card) -> None:
    if card.status != CardStatus.ACTIVE:
        raise CardOperationNotAllowedError(
            f"Cannot block card with status: {card.status.value}"
        )


def validate_for_activate(card: Card) -> None:
    if card.status != CardStatus.BLOCKED:
        raise CardOperationNotAllowedError(
            f"Cannot activate card with status: {card.status.value}"
        )


def validate_for_delete(card: Card) -> None:
    """A card can be deleted only once it is BLOCKED or EXPIRED and empty."""
    if card.status == CardStatus.ACTIVE:
        raise CardOperationNotAllowedError(
            f"Cannot delete card with status: {card.status.value}. Card must be blocked first"
        )

    if card.balance != Decimal("0"):
        raise CardOperationNotAllowedError(
            f"Cannot delete card with non-zero balance: {card.balance}"
        )
