"""Repository for user database operations."""

import uuid

from sqlalchemy import exists, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from bankcards.models.user import User
from bankcards.repositories.base import Page


class UserRepository:
    """Storage capability over User rows."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_by_id(self, user_id: uuid.UUID) -> User | None:
        result = await self.session.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def find_by_username(self, username: str) -> User | None:
        result = await self.session.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()

    async def exists_by_username(self, username: str) -> bool:
        result = await self.session.execute(
            select(exists().where(User.username == username))
        )
        return bool(result.scalar())

    async def save(self, user: User) -> User:
        self.session.add(user)
        await self.session.flush()
        return user

    async def delete(self, user: User) -> None:
        await self.session.delete(user)
        await self.session.flush()

    async def find_all(self, limit: int = 20, offset: int = 0) -> Page[User]:
        total = await self.session.scalar(select(func.count()).select_from(User))
        result = await self.session.execute(
            select(User)
            .order_by(User.created_at, User.id)
            .limit(limit)
            .offset(offset)
        )
        return Page(items=list(result.scalars().all()), total=total or 0, limit=limit, offset=offset)
