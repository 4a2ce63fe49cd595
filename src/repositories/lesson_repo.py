"""
Lesson Repository - Data access layer for lessons
"""
from typing import Optional, Sequence

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from src.model.course_models import Lesson
from src.repositories.base_repo import BaseRepository


class LessonRepository(BaseRepository[Lesson]):
    """
    Repository for Lesson entity
    """

    def __init__(self, session: AsyncSession):
        super().__init__(Lesson, session)

    async def get_lessons_by_course_id(
        self,
        course_id: int,
        include_deleted: bool = False
    ) -> Sequence[Lesson]:
        """
        Get all lessons for a course in playback order.

        Args:
            course_id: ID of the course
            include_deleted: Whether to include soft-deleted records

        Returns:
            List of Lesson instances ordered by order_index, then id
        """
        query = (
            select(Lesson)
            .where(Lesson.course_id == course_id)
            .order_by(Lesson.order_index, Lesson.id)
        )

        if not include_deleted:
            query = query.where(Lesson.is_deleted.is_(False))

        result = await self.session.execute(query)
        return result.scalars().all()

    async def count_by_course(self, course_id: int) -> int:
        return await self.count_by_filters({"course_id": course_id})

    async def get_max_order_index(self, course_id: int) -> Optional[int]:
        """Highest order_index among live lessons, or None when the course is empty"""
        query = select(func.max(Lesson.order_index)).where(
            Lesson.course_id == course_id,
            Lesson.is_deleted.is_(False),
        )
        result = await self.session.execute(query)
        return result.scalar()
