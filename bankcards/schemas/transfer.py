"""
Pydantic schemas for the transfer endpoint.

Amounts are decimals with at most two fraction digits (e.g. "100.50").
Send them as JSON strings or numbers; they are parsed straight into
Decimal and never pass through float arithmetic in the service.
"""

import uuid
from decimal import Decimal

from pydantic import BaseModel, Field


class TransferRequest(BaseModel):
    """Request body for POST /transfers."""
    from_card_id: uuid.UUID
    to_card_id: uuid.UUID
    amount: Decimal = Field(
        gt=0,
        max_digits=10,
        decimal_places=2,
        description="Amount to move (must be positive, two decimal places max)",
    )
