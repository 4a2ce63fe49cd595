"""
Review Repository - course ratings
"""
from typing import Optional, Sequence, Tuple

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from src.model.learning_models import Review
from src.repositories.base_repo import BaseRepository


class ReviewRepository(BaseRepository[Review]):

    def __init__(self, session: AsyncSession):
        super().__init__(Review, session)

    async def get_review(self, user_id: int, course_id: int) -> Optional[Review]:
        query = select(Review).where(
            Review.user_id == user_id,
            Review.course_id == course_id,
        )
        result = await self.session.execute(query)
        return result.unique().scalar_one_or_none()

    async def get_by_course(
            self, course_id: int, skip: int = 0, limit: int = 20
    ) -> Tuple[Sequence[Review], int]:
        """Reviews of a course, newest first, plus the total count"""
        total = await self.count_by_filters({"course_id": course_id})
        query = (
            select(Review)
            .where(Review.course_id == course_id)
            .order_by(Review.created_date.desc(), Review.id.desc())
            .offset(skip)
            .limit(limit)
        )
        result = await self.session.execute(query)
        return result.unique().scalars().all(), total

    async def get_rating_stats(self, course_id: int) -> Tuple[float, int]:
        """(average rating, review count) for a course; (0.0, 0) when unrated"""
        query = select(func.avg(Review.rating), func.count(Review.id)).where(
            Review.course_id == course_id
        )
        avg, count = (await self.session.execute(query)).one()
        return (float(avg) if avg is not None else 0.0), (count or 0)
