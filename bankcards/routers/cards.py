"""
Cards router — card issuance, lookup and lifecycle.

Endpoints:
  POST   /cards                — [ADMIN] Issue a card to a user
  GET    /cards                — List cards (ADMIN: all, USER: own)
  GET    /cards/{id}           — Get a card (owner or ADMIN)
  GET    /cards/{id}/owner     — [ADMIN] Get the user who owns the card
  PATCH  /cards/{id}/block     — Block an ACTIVE card (owner or ADMIN)
  PATCH  /cards/{id}/activate  — [ADMIN] Re-activate a BLOCKED card
  DELETE /cards/{id}           — [ADMIN] Delete a non-active, empty card

Card numbers are encrypted at rest and never returned in full: responses
carry only the masked form "**** **** **** 1234". Reading a card whose
expiry date has passed marks it EXPIRED.
"""

import uuid

from fastapi import APIRouter, Depends, Query, status

from bankcards.application import card_app
from bankcards.dependencies import (
    get_card_repository,
    get_current_user,
    get_user_repository,
    require_admin,
)
from bankcards.models.user import User
from bankcards.repositories import CardRepository, UserRepository
from bankcards.schemas.card import CardCreateRequest, CardPageResponse, CardResponse
from bankcards.schemas.user import UserResponse

router = APIRouter()


@router.post(
    "",
    response_model=CardResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Issue a card to a user",
)
async def create_card(
    request: CardCreateRequest,
    admin: User = Depends(require_admin),
    card_repository: CardRepository = Depends(get_card_repository),
    user_repository: UserRepository = Depends(get_user_repository),
):
    """
    Issue a new ACTIVE card to an existing USER.

    - **card_number**: "dddd dddd dddd dddd", must not already be registered
    - **owner_id**: Must be a USER (admins cannot own cards)
    - **expiry_date**: Must be in the future
    - **initial_balance**: Non-negative, two decimal places max
    """
    return await card_app.create_card(
        card_repository,
        user_repository,
        card_number=request.card_number,
        owner_id=request.owner_id,
        expiry_date=request.expiry_date,
        initial_balance=request.initial_balance,
    )


@router.get(
    "",
    response_model=CardPageResponse,
    summary="List cards",
)
async def list_cards(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    user: User = Depends(get_current_user),
    card_repository: CardRepository = Depends(get_card_repository),
):
    """Admins see every card; card holders see only their own."""
    return await card_app.get_cards_for_user(card_repository, user, limit=limit, offset=offset)


@router.get(
    "/{card_id}",
    response_model=CardResponse,
    summary="Get a card",
)
async def get_card(
    card_id: uuid.UUID,
    user: User = Depends(get_current_user),
    card_repository: CardRepository = Depends(get_card_repository),
):
    """Return a card to its owner or to an admin (403 for anyone else)."""
    return await card_app.get_card_for_user(card_repository, card_id, user)


@router.get(
    "/{card_id}/owner",
    response_model=UserResponse,
    summary="Get the owner of a card",
)
async def get_card_owner(
    card_id: uuid.UUID,
    admin: User = Depends(require_admin),
    card_repository: CardRepository = Depends(get_card_repository),
    user_repository: UserRepository = Depends(get_user_repository),
):
    return await card_app.get_owner_by_card_id(card_repository, user_repository, card_id)


@router.patch(
    "/{card_id}/block",
    response_model=CardResponse,
    summary="Block a card",
)
async def block_card(
    card_id: uuid.UUID,
    user: User = Depends(get_current_user),
    card_repository: CardRepository = Depends(get_card_repository),
):
    """Only ACTIVE cards can be blocked."""
    return await card_app.block_card_for_user(card_repository, card_id, user)


@router.patch(
    "/{card_id}/activate",
    response_model=CardResponse,
    summary="Activate a blocked card",
)
async def activate_card(
    card_id: uuid.UUID,
    admin: User = Depends(require_admin),
    card_repository: CardRepository = Depends(get_card_repository),
):
    """Only BLOCKED cards can be activated; EXPIRED is final."""
    return await card_app.activate_card(card_repository, card_id)


@router.delete(
    "/{card_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a card",
)
async def delete_card(
    card_id: uuid.UUID,
    admin: User = Depends(require_admin),
    card_repository: CardRepository = Depends(get_card_repository),
):
    """
    Delete a card.

    The card must be BLOCKED or EXPIRED and its balance must be exactly zero.
    """
    await card_app.delete_card(card_repository, card_id)
