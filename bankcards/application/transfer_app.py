"""
Transfer application service — resolves the caller's two cards and moves money.

Both cards are looked up by (card id, caller id), so a card that belongs to
someone else is reported as "not found" rather than "forbidden". The rows
are fetched in ascending id order with FOR UPDATE, which gives concurrent
transfers over the same pair of cards one lock order on databases that
support row locks. The two balance changes are flushed into the request
session and committed together by get_db().
"""

from bankcards.logging_config import get_logger
from bankcards.models.user import User
from bankcards.repositories import CardRepository
from bankcards.schemas.transfer import TransferRequest
from bankcards.services import card_service, transfer_service

logger = get_logger(__name__)


async def transfer(
    card_repository: CardRepository,
    user: User,
    request: TransferRequest,
) -> None:
    """
    Transfer money between two cards owned by the user.

    Raises:
        CardNotFoundError: If either card is missing or not owned by the user.
        TransferNotAllowedError: If a transfer precondition fails.
    """
    cards = {}
    for card_id in sorted({request.from_card_id, request.to_card_id}):
        cards[card_id] = await card_service.get_card_by_id_and_owner_id(
            card_repository,
            card_id,
            user.id,
            for_update=True,
        )

    from_card = cards[request.from_card_id]
    to_card = cards[request.to_card_id]

    transfer_service.transfer(from_card, to_card, request.amount)

    await card_repository.save(from_card)
    if to_card is not from_card:
        await card_repository.save(to_card)

    logger.info(
        "transfer_completed",
        username=user.username,
        from_card_id=str(from_card.id),
        to_card_id=str(to_card.id),
        amount=str(request.amount),
    )
