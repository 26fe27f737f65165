"""User persistence."""

from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from talentpool.models.user import User


class UserRepository:
    """Lookups and writes on the users table. Flushes, never commits."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find(self, user_id: int) -> Optional[User]:
        return await self.db.get(User, user_id)

    async def find_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(func.lower(User.email) == email.lower()))
        return result.scalar_one_or_none()

    async def create(self, data: dict) -> User:
        user = User(**data)
        self.db.add(user)
        await self.db.flush()
        await self.db.refresh(user)
        return user

    async def set_password_hash(self, user: User, password_hash: str) -> User:
        user.password_hash = password_hash
        await self.db.flush()
        return user

    async def count_by_role(self, role: str) -> int:
        result = await self.db.execute(select(func.count(User.id)).where(User.role == role))
        return result.scalar() or 0
