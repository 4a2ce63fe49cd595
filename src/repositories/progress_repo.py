"""
Progress Repository - per-lesson completion flags
"""
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.model.course_models import Lesson
from src.model.learning_models import Progress
from src.repositories.base_repo import BaseRepository


class ProgressRepository(BaseRepository[Progress]):

    def __init__(self, session: AsyncSession):
        super().__init__(Progress, session)

    async def get_progress(self, user_id: int, lesson_id: int) -> Optional[Progress]:
        query = select(Progress).where(
            Progress.user_id == user_id,
            Progress.lesson_id == lesson_id,
        )
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get_completed_lesson_ids(self, user_id: int, course_id: int) -> set[int]:
        """
        IDs of the live lessons of a course the learner has completed.

        SQL equivalent:
            SELECT p.lesson_id FROM progress p
            JOIN lessons l ON l.id = p.lesson_id
            WHERE p.user_id = :user_id AND l.course_id = :course_id
              AND p.is_completed AND NOT l.is_deleted
        """
        query = (
            select(Progress.lesson_id)
            .join(Lesson, Lesson.id == Progress.lesson_id)
            .where(
                Progress.user_id == user_id,
                Progress.is_completed.is_(True),
                Lesson.course_id == course_id,
                Lesson.is_deleted.is_(False),
            )
        )
        result = await self.session.execute(query)
        return set(result.scalars().all())
