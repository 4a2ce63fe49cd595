"""
Payment Repository - checkout attempts
"""
from typing import Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.model.payment_models import Payment
from src.repositories.base_repo import BaseRepository


class PaymentRepository(BaseRepository[Payment]):

    def __init__(self, session: AsyncSession):
        super().__init__(Payment, session)

    async def get_by_session_id(self, session_id: str) -> Optional[Payment]:
        return await self.get_by_field("provider_session_id", session_id)

    async def get_by_user(self, user_id: int) -> Sequence[Payment]:
        query = (
            select(Payment)
            .where(Payment.user_id == user_id)
            .order_by(Payment.created_date.desc(), Payment.id.desc())
        )
        result = await self.session.execute(query)
        return result.unique().scalars().all()
