"""Repository for card database operations."""

import uuid

from sqlalchemy import exists, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from bankcards.logging_config import get_logger
from bankcards.models.card import Card
from bankcards.repositories.base import Page

logger = get_logger(__name__)


class CardRepository:
    """Storage capability over Card rows.

    Lookups that must respect ownership use a single query keyed on both
    the card id and the owner id, so "no such card" and "not your card"
    are indistinguishable to the caller.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_by_id(self, card_id: uuid.UUID) -> Card | None:
        result = await self.session.execute(select(Card).where(Card.id == card_id))
        return result.scalar_one_or_none()

    async def find_by_id_and_owner_id(
        self,
        card_id: uuid.UUID,
        owner_id: uuid.UUID,
        for_update: bool = False,
    ) -> Card | None:
        """Fetch a card only if it belongs to the given owner.

        Args:
            card_id: The card to fetch.
            owner_id: The user who must own it.
            for_update: Lock the row (SELECT ... FOR UPDATE). No-op on
                SQLite, row lock on PostgreSQL.
        """
        query = select(Card).where(Card.id == card_id, Card.owner_id == owner_id)
        if for_update:
            query = query.with_for_update()
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def exists_by_card_number_hash(self, card_number_hash: str) -> bool:
        result = await self.session.execute(
            select(exists().where(Card.card_number_hash == card_number_hash))
        )
        return bool(result.scalar())

    async def exists_by_owner(self, owner_id: uuid.UUID) -> bool:
        result = await self.session.execute(
            select(exists().where(Card.owner_id == owner_id))
        )
        return bool(result.scalar())

    async def save(self, card: Card) -> Card:
        """Add or update a card and flush so the id and defaults are populated."""
        self.session.add(card)
        await self.session.flush()
        logger.debug("card_saved", card_id=str(card.id))
        return card

    async def delete(self, card: Card) -> None:
        await self.session.delete(card)
        await self.session.flush()
        logger.debug("card_deleted", card_id=str(card.id))

    async def find_all(self, limit: int = 20, offset: int = 0) -> Page[Card]:
        total = await self.session.scalar(select(func.count()).select_from(Card))
        result = await self.session.execute(
            select(Card)
            .order_by(Card.created_at, Card.id)
            .limit(limit)
            .offset(offset)
        )
        return Page(items=list(result.scalars().all()), total=total or 0, limit=limit, offset=offset)

    async def find_all_by_owner(
        self,
        owner_id: uuid.UUID,
        limit: int = 20,
        offset: int = 0,
    ) -> Page[Card]:
        total = await self.session.scalar(
            select(func.count()).select_from(Card).where(Card.owner_id == owner_id)
        )
        result = await self.session.execute(
            select(Card)
            .where(Card.owner_id == owner_id)
            .order_by(Card.created_at, Card.id)
            .limit(limit)
            .offset(offset)
        )
        return Page(items=list(result.scalars().all()), total=total or 0, limit=limit, offset=offset)
