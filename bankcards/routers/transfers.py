"""
Transfers router — money transfers between a card holder's own cards.

Endpoints:
  POST /transfers — Move money from one of the caller's cards to another

Only USER accounts can transfer; admins own no cards. Both cards must
belong to the caller, be distinct and ACTIVE, and the source must hold at
least the amount. Both balance changes are committed together or not at all.
"""

from fastapi import APIRouter, Depends, status

from bankcards.application import transfer_app
from bankcards.dependencies import get_card_repository, require_user
from bankcards.models.user import User
from bankcards.repositories import CardRepository
from bankcards.schemas.transfer import TransferRequest

router = APIRouter()


@router.post(
    "",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Transfer money between own cards",
)
async def create_transfer(
    request: TransferRequest,
    user: User = Depends(require_user),
    card_repository: CardRepository = Depends(get_card_repository),
):
    """
    Transfer money between two of your cards.

    - **from_card_id** / **to_card_id**: Both must be yours and different
    - **amount**: Positive, two decimal places max (e.g. "100.50")
    """
    await transfer_app.transfer(card_repository, user, request)
