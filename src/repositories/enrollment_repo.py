"""
Enrollment Repository - who is registered for which course
"""
from typing import Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.model.learning_models import Enrollment
from src.repositories.base_repo import BaseRepository


class EnrollmentRepository(BaseRepository[Enrollment]):

    def __init__(self, session: AsyncSession):
        super().__init__(Enrollment, session)

    async def get_enrollment(self, user_id: int, course_id: int) -> Optional[Enrollment]:
        query = select(Enrollment).where(
            Enrollment.user_id == user_id,
            Enrollment.course_id == course_id,
        )
        result = await self.session.execute(query)
        return result.unique().scalar_one_or_none()

    async def is_enrolled(self, user_id: int, course_id: int) -> bool:
        return await self.get_enrollment(user_id, course_id) is not None

    async def get_by_user(self, user_id: int) -> Sequence[Enrollment]:
        """Enrollments of a learner, most recent first, with course loaded"""
        query = (
            select(Enrollment)
            .where(Enrollment.user_id == user_id)
            .order_by(Enrollment.created_date.desc(), Enrollment.id.desc())
        )
        result = await self.session.execute(query)
        return result.unique().scalars().all()

    async def count_by_course(self, course_id: int) -> int:
        return await self.count_by_filters({"course_id": course_id})
