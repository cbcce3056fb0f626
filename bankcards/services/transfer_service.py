"""
Transfer service — moves money between two cards.

This is pure decision logic on two cards the caller has already loaded:
it validates, then applies exactly two balance changes. It opens no
transaction and takes no locks. The caller fetches both cards inside one
session (locking the rows where the database supports it) and that
session commits both balance changes together or neither of them.

The arguments are never reordered and the direction of the transfer is
never inferred: money always moves from `from_card` to `to_card`.
"""

from decimal import Decimal

from bankcards.logging_config import get_logger
from bankcards.models.card import Card
from bankcards.validators.transfer_validator import validate_for_transfer

logger = get_logger(__name__)


def transfer(from_card: Card, to_card: Card, amount: Decimal) -> None:
    """
    Transfer `amount` from one card to another.

    Invariants on success:
        from_card.balance_after + amount == from_card.balance_before
        to_card.balance_after - amount == to_card.balance_before

    Raises:
        TransferNotAllowedError: If any precondition fails (no balance
            is touched in that case).
    """
    amount = validate_for_transfer(from_card, to_card, amount)

    from_card.balance = from_card.balance - amount
    to_card.balance = to_card.balance + amount

    logger.info(
        "transfer_applied",
        from_card_id=str(from_card.id),
        to_card_id=str(to_card.id),
        amount=str(amount),
    )
