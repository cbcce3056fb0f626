"""
Card service — card creation, retrieval and lifecycle transitions.

Card creation takes a raw card number and:
  1. Computes its HMAC blind index (for the duplicate check)
  2. Encrypts it with the card cipher (for storage)
  3. Validates owner role, expiry date and uniqueness
  4. Stores the card as ACTIVE with the initial balance

Lazy expiry:
  A card whose expiry date has passed is moved to EXPIRED the first time it
  is read by id (or by id + owner). expire_if_past_due() is the transition
  itself; the read functions call it and save the card when it changed, so
  the write happens once and inside the caller's session. A second read
  finds the card already EXPIRED and writes nothing.
"""

import uuid
from datetime import date
from decimal import Decimal

from bankcards.crypto import card_cipher, card_hasher, mask_card_number
from bankcards.exceptions import CardNotFoundError
from bankcards.logging_config import get_logger
from bankcards.models.card import Card, CardStatus
from bankcards.models.types import to_money
from bankcards.models.user import User
from bankcards.repositories import CardRepository, Page
from bankcards.validators import card_validator
from bankcards.validators.card_validator import utc_today

logger = get_logger(__name__)


def expire_if_past_due(card: Card, today: date | None = None) -> bool:
    """
    Move the card to EXPIRED if its expiry date is strictly before today.

    Returns:
        True if the status changed (the caller must persist the card),
        False if the card was already EXPIRED or is not yet past due.
    """
    today = today or utc_today()
    if card.expiry_date < today and card.status != CardStatus.EXPIRED:
        card.status = CardStatus.EXPIRED
        return True
    return False


async def _apply_expiry(card_repository: CardRepository, card: Card) -> Card:
    if expire_if_past_due(card):
        card = await card_repository.save(card)
        logger.info("card_expired", card_id=str(card.id))
    return card


async def create_card(
    card_repository: CardRepository,
    owner: User,
    card_number: str,
    expiry_date: date,
    initial_balance: Decimal = Decimal("0.00"),
) -> Card:
    """
    Create a new ACTIVE card for a user.

    Args:
        card_repository: Storage for cards.
        owner: The user who will own the card (must not be ADMIN).
        card_number: Raw number, "dddd dddd dddd dddd". Never stored as-is.
        expiry_date: Must be strictly after today.
        initial_balance: Starting balance, two fraction digits.

    Raises:
        CardOperationNotAllowedError: If the owner is an ADMIN.
        CardDataNotValidError: If the expiry date is not in the future.
        CardAlreadyExistsError: If the card number is already registered.
    """
    card = Card(
        card_number_encrypted=card_cipher.encrypt(card_number),
        card_number_hash=card_hasher.hash(card_number),
        owner_id=owner.id,
        expiry_date=expiry_date,
        status=CardStatus.ACTIVE,
        balance=to_money(initial_balance),
    )

    masked = mask_card_number(card_number)
    await card_validator.validate_for_create(card_repository, card, owner, masked)

    card = await card_repository.save(card)
    logger.info("card_created", card_id=str(card.id), card_number=masked, owner_id=str(owner.id))
    return card


async def get_card_by_id(card_repository: CardRepository, card_id: uuid.UUID) -> Card:
    """
    Get a card by id, applying the lazy expiry transition.

    Raises:
        CardNotFoundError: If no card has this id.
    """
    card = await card_repository.find_by_id(card_id)
    if card is None:
        raise CardNotFoundError(f"Card with id {card_id} not found")
    return await _apply_expiry(card_repository, card)


async def get_card_by_id_and_owner_id(
    card_repository: CardRepository,
    card_id: uuid.UUID,
    owner_id: uuid.UUID,
    for_update: bool = False,
) -> Card:
    """
    Get a card only if it belongs to the owner, applying lazy expiry.

    A card that exists but belongs to someone else is reported exactly like
    a card that does not exist.

    Raises:
        CardNotFoundError: If there is no such card for this owner.
    """
    card = await card_repository.find_by_id_and_owner_id(card_id, owner_id, for_update=for_update)
    if card is None:
        raise CardNotFoundError("Card not found or does not belong to the user")
    return await _apply_expiry(card_repository, card)


async def get_cards(card_repository: CardRepository, limit: int = 20, offset: int = 0) -> Page[Card]:
    return await card_repository.find_all(limit=limit, offset=offset)


async def get_cards_by_owner(
    card_repository: CardRepository,
    owner_id: uuid.UUID,
    limit: int = 20,
    offset: int = 0,
) -> Page[Card]:
    return await card_repository.find_all_by_owner(owner_id, limit=limit, offset=offset)


def block_card(card: Card) -> Card:
    card_validator.validate_for_block(card)
    card.status = CardStatus.BLOCKED
    return card


def activate_card(card: Card) -> Card:
    card_validator.validate_for_activate(card)
    card.status = CardStatus.ACTIVE
    return card


async def delete_card(card_repository: CardRepository, card: Card) -> None:
    card_validator.validate_for_delete(card)
    await card_repository.delete(card)
    logger.info("card_deleted", card_id=str(card.id))


def reveal_masked_number(card: Card) -> str:
    """Decrypt the stored number and return its display form.

    Raises:
        DataCorruptionError: If the stored ciphertext cannot be decrypted.
    """
    return mask_card_number(card_cipher.decrypt(card.card_number_encrypted))
