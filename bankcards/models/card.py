"""
Card model — a bank card owned by a User, with its own balance.

Card number storage:
  - card_number_encrypted: AES-GCM ciphertext of the raw number
    ("1111 2222 3333 4444"), hex text. Decrypted only for display.
  - card_number_hash: HMAC-SHA256 blind index of the raw number. UNIQUE,
    and the only column used to detect duplicate cards. Computed once at
    creation and never recomputed.

Lifecycle:
  ACTIVE <-> BLOCKED, and either of them -> EXPIRED once the expiry date
  has passed (applied when the card is read). EXPIRED is final for block
  and activate. The transitions themselves live in card_service.

Balance:
  A Decimal with two fraction digits, stored as integer cents (see
  models.types.Money). A CHECK constraint keeps it non-negative at the
  database level; the transfer validator enforces the same rule first.
"""

import enum
import uuid
from datetime import date, datetime, timezone
from decimal import Decimal

from sqlalchemy import String, Date, DateTime, Enum, ForeignKey, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column

from bankcards.database import Base
from bankcards.models.types import Money


class CardStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    BLOCKED = "BLOCKED"
    EXPIRED = "EXPIRED"


class Card(Base):
    __tablename__ = "cards"

    __table_args__ = (
        CheckConstraint("balance_cents >= 0", name="ck_cards_non_negative_balance"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True,
        default=uuid.uuid4,
    )

    card_number_encrypted: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    card_number_hash: Mapped[str] = mapped_column(
        String(64),
        unique=True,
        nullable=False,
        index=True,
    )

    owner_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )

    expiry_date: Mapped[date] = mapped_column(
        Date,
        nullable=False,
    )

    status: Mapped[CardStatus] = mapped_column(
        Enum(CardStatus),
        default=CardStatus.ACTIVE,
        nullable=False,
    )

    balance: Mapped[Decimal] = mapped_column(
        "balance_cents",
        Money,
        default=Decimal("0.00"),
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
