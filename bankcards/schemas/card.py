"""
Pydantic schemas for Card endpoints.

Raw card numbers are accepted only by CardCreateRequest and are NEVER
returned. Responses carry the masked form ("**** **** **** 4444"); the
ciphertext and the blind-index hash stay inside the service.
"""

import uuid
from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field

from bankcards.models.card import CardStatus

# Four groups of four digits separated by single spaces
CARD_NUMBER_PATTERN = r"^\d{4} \d{4} \d{4} \d{4}$"


class CardCreateRequest(BaseModel):
    """Request body for POST /cards."""
    card_number: str = Field(
        pattern=CARD_NUMBER_PATTERN,
        description='Raw card number, e.g. "1111 2222 3333 4444"',
    )
    owner_id: uuid.UUID
    expiry_date: date = Field(description="Must be in the future")
    initial_balance: Decimal = Field(
        default=Decimal("0.00"),
        ge=0,
        max_digits=10,
        decimal_places=2,
    )


class CardResponse(BaseModel):
    """Public representation of a card (masked number only)."""
    id: uuid.UUID
    masked_card_number: str
    expiry_date: date
    status: CardStatus
    balance: Decimal


class CardPageResponse(BaseModel):
    """One page of cards."""
    items: list[CardResponse]
    total: int
    limit: int
    offset: int
