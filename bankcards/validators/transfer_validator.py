"""
Transfer validator — the ordered preconditions of a card-to-card transfer.

Checks run in a fixed order and the first failure wins:
  1. source and destination are different cards
  2. source card is ACTIVE
  3. destination card is ACTIVE
  4. amount is strictly positive with at most two fraction digits
  5. source balance covers the amount
"""

from decimal import Decimal

from bankcards.exceptions import TransferNotAllowedError
from bankcards.models.card import Card, CardStatus
from bankcards.models.types import to_money


def validate_for_transfer(from_card: Card, to_card: Card, amount: Decimal) -> Decimal:
    """
    Validate a transfer and return the amount normalized to two places.

    Raises:
        TransferNotAllowedError: With a message naming the failed check.
    """
    if from_card.id == to_card.id:
        raise TransferNotAllowedError("Cannot transfer to the same card")

    if from_card.status != CardStatus.ACTIVE:
        raise TransferNotAllowedError(
            f"Cannot transfer from card with status: {from_card.status.value}"
        )

    if to_card.status != CardStatus.ACTIVE:
        raise TransferNotAllowedError(
            f"Cannot transfer to card with status: {to_card.status.value}"
        )

    if amount <= 0:
        raise TransferNotAllowedError("Transfer amount must be positive")

    try:
        amount = to_money(amount)
    except ValueError:
        raise TransferNotAllowedError("Transfer amount must have at most 2 decimal places")

    if from_card.balance < amount:
        raise TransferNotAllowedError(
            "Insufficient balance for transfer. "
            f"Available: {from_card.balance}, Required: {amount}"
        )

    return amount
