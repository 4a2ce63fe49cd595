"""
User Repository - Data access layer for accounts
"""
from typing import Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from src.model.user_models import User
from src.repositories.base_repo import BaseRepository


class UserRepository(BaseRepository[User]):
    """
    Repository for User entity
    """

    def __init__(self, session: AsyncSession):
        super().__init__(User, session)

    async def get_by_email(self, email: str) -> Optional[User]:
        """Case-insensitive lookup by email"""
        query = select(User).where(func.lower(User.email) == email.strip().lower())
        result = await self.session.execute(query)
        return result.scalar_one_or_none()
