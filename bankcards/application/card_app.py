"""
Card application service — who may do what to which card.

The routers pass in the authenticated user (resolved once by the JWT
dependency) and this module decides whether that user may act on the card
before calling into the card domain service:

  - Read / Block:  the card's owner, or any ADMIN
  - Create / Activate / Delete / Owner lookup:  ADMIN only (enforced by the
    router dependency `require_admin`)
  - List:  ADMIN sees every card, USER sees their own

It also maps cards to responses, which is the only place a stored card
number is decrypted, and only to be masked straight away.
"""

import uuid
from datetime import date
from decimal import Decimal

from bankcards.exceptions import CardAccessDeniedError
from bankcards.logging_config import get_logger
from bankcards.models.card import Card
from bankcards.models.user import Role, User
from bankcards.repositories import CardRepository, Page, UserRepository
from bankcards.schemas.card import CardPageResponse, CardResponse
from bankcards.schemas.user import UserResponse
from bankcards.services import card_service, user_service

logger = get_logger(__name__)


def to_card_response(card: Card) -> CardResponse:
    return CardResponse(
        id=card.id,
        masked_card_number=card_service.reveal_masked_number(card),
        expiry_date=card.expiry_date,
        status=card.status,
        balance=card.balance,
    )


def to_card_page_response(page: Page[Card]) -> CardPageResponse:
    return CardPageResponse(
        items=[to_card_response(card) for card in page.items],
        total=page.total,
        limit=page.limit,
        offset=page.offset,
    )


def _ensure_owner_or_admin(card: Card, user: User, action: str) -> None:
    if card.owner_id == user.id:
        return
    if user.role == Role.ADMIN:
        logger.info("admin_card_access", action=action, username=user.username, card_id=str(card.id))
        return

    logger.warning("card_access_denied", action=action, username=user.username, card_id=str(card.id))
    raise CardAccessDeniedError(
        f"User '{user.username}' does not have access to {action} card with id {card.id}"
    )


async def create_card(
    card_repository: CardRepository,
    user_repository: UserRepository,
    card_number: str,
    owner_id: uuid.UUID,
    expiry_date: date,
    initial_balance: Decimal,
) -> CardResponse:
    """[ADMIN ONLY] Issue a card to an existing user."""
    owner = await user_service.get_user_by_id(user_repository, owner_id)
    card = await card_service.create_card(
        card_repository,
        owner=owner,
        card_number=card_number,
        expiry_date=expiry_date,
        initial_balance=initial_balance,
    )
    return to_card_response(card)


async def get_card_for_user(
    card_repository: CardRepository,
    card_id: uuid.UUID,
    user: User,
) -> CardResponse:
    """
    Get a card as the given user.

    Raises:
        CardNotFoundError: If the card does not exist.
        CardAccessDeniedError: If the user is neither the owner nor an admin.
    """
    card = await card_service.get_card_by_id(card_repository, card_id)
    _ensure_owner_or_admin(card, user, "read")
    return to_card_response(card)


async def get_owner_by_card_id(
    card_repository: CardRepository,
    user_repository: UserRepository,
    card_id: uuid.UUID,
) -> UserResponse:
    """[ADMIN ONLY] Return the user who owns the card."""
    card = await card_service.get_card_by_id(card_repository, card_id)
    owner = await user_service.get_user_by_id(user_repository, card.owner_id)
    return UserResponse.model_validate(owner)


async def get_cards_for_user(
    card_repository: CardRepository,
    user: User,
    limit: int,
    offset: int,
) -> CardPageResponse:
    if user.role == Role.ADMIN:
        page = await card_service.get_cards(card_repository, limit=limit, offset=offset)
    else:
        page = await card_service.get_cards_by_owner(card_repository, user.id, limit=limit, offset=offset)

    logger.info(
        "cards_listed",
        username=user.username,
        count=len(page.items),
        limit=limit,
        offset=offset,
    )
    return to_card_page_response(page)


async def block_card_for_user(
    card_repository: CardRepository,
    card_id: uuid.UUID,
    user: User,
) -> CardResponse:
    """
    Block a card as the given user.

    Raises:
        CardNotFoundError: If the card does not exist.
        CardAccessDeniedError: If the user is neither the owner nor an admin.
        CardOperationNotAllowedError: If the card is not ACTIVE.
    """
    card = await card_service.get_card_by_id(card_repository, card_id)
    _ensure_owner_or_admin(card, user, "block")
    card = card_service.block_card(card)
    card = await card_repository.save(card)
    return to_card_response(card)


async def activate_card(card_repository: CardRepository, card_id: uuid.UUID) -> CardResponse:
    """[ADMIN ONLY] Re-activate a BLOCKED card."""
    card = await card_service.get_card_by_id(card_repository, card_id)
    card = card_service.activate_card(card)
    card = await card_repository.save(card)
    return to_card_response(card)


async def delete_card(card_repository: CardRepository, card_id: uuid.UUID) -> None:
    """[ADMIN ONLY] Delete a BLOCKED or EXPIRED card with a zero balance."""
    card = await card_service.get_card_by_id(card_repository, card_id)
    await card_service.delete_card(card_repository, card)
