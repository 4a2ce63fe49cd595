"""
Player Service - the learner's view of a course.

Access rules:
    - Outline: enrolled learners, plus the instructor and admins
    - Single lesson: the above, or anyone when the lesson is a free preview
    - Marking progress: enrolled learners only
"""

import logging
from typing import Optional, Sequence, Tuple

from src.model.base import utcnow
from src.model.course_models import Course, Lesson
from src.model.enums import CourseStatus
from src.model.learning_models import Enrollment
from src.model.user_models import User
from src.repositories.course_repo import CourseRepository
from src.repositories.enrollment_repo import EnrollmentRepository
from src.repositories.lesson_repo import LessonRepository
from src.repositories.progress_repo import ProgressRepository
from src.schemas.course import CourseSummary, LessonResponse
from src.schemas.learning import (
    PlayerLesson,
    PlayerLessonResponse,
    PlayerOutline,
    ProgressResponse,
)
from src.services.course_service import can_manage
from src.services.enrollment_service import progress_percent
from src.utils.exceptions import AccessDeniedException, ResourceNotFoundException

logger = logging.getLogger(__name__)


def current_lesson_id(lessons: Sequence[Lesson], completed_ids: set[int]) -> Optional[int]:
    """First incomplete lesson; the last lesson once everything is done"""
    for lesson in lessons:
        if lesson.id not in completed_ids:
            return lesson.id
    return lessons[-1].id if lessons else None


class PlayerService:

    def __init__(
            self,
            course_repository: CourseRepository,
            lesson_repository: LessonRepository,
            enrollment_repository: EnrollmentRepository,
            progress_repository: ProgressRepository,
    ):
        self._course_repository = course_repository
        self._lesson_repository = lesson_repository
        self._enrollment_repository = enrollment_repository
        self._progress_repository = progress_repository

    async def _get_course_for_learner(
            self, slug: str, user: Optional[User]
    ) -> Tuple[Course, Optional[Enrollment]]:
        """
        Resolve a course for the player. Enrolled learners keep access after
        a course is archived; everyone else only sees published courses.
        """
        course = await self._course_repository.get_by_slug(slug)
        if not course:
            raise ResourceNotFoundException(f"Course not found: {slug}")

        enrollment = None
        if user is not None:
            enrollment = await self._enrollment_repository.get_enrollment(user.id, course.id)

        if course.status != CourseStatus.PUBLISHED and enrollment is None and not can_manage(user, course):
            raise ResourceNotFoundException(f"Course not found: {slug}")
        return course, enrollment

    async def get_outline(self, user: User, slug: str) -> PlayerOutline:
        course, enrollment = await self._get_course_for_learner(slug, user)
        if enrollment is None and not can_manage(user, course):
            raise AccessDeniedException("Enroll in this course to access the player")

        lessons = await self._lesson_repository.get_lessons_by_course_id(course.id)
        completed_ids = await self._progress_repository.get_completed_lesson_ids(user.id, course.id)

        return PlayerOutline(
            course=CourseSummary.model_validate(course),
            lessons=[
                PlayerLesson.model_validate(lesson).model_copy(
                    update={"completed": lesson.id in completed_ids}
                )
                for lesson in lessons
            ],
            completed_count=len(completed_ids),
            progress_percent=progress_percent(len(completed_ids), len(lessons)),
            current_lesson_id=current_lesson_id(lessons, completed_ids),
            completed_at=enrollment.completed_at if enrollment else None,
        )

    async def get_lesson(self, user: Optional[User], slug: str, lesson_id: int) -> PlayerLessonResponse:
        course, enrollment = await self._get_course_for_learner(slug, user)
        lessons = await self._lesson_repository.get_lessons_by_course_id(course.id)

        index = next((i for i, lesson in enumerate(lessons) if lesson.id == lesson_id), None)
        if index is None:
            raise ResourceNotFoundException(f"Lesson {lesson_id} not found in course {slug}")
        lesson = lessons[index]

        if not (lesson.is_free or enrollment is not None or can_manage(user, course)):
            raise AccessDeniedException("Enroll in this course to watch this lesson")

        completed = False
        if user is not None:
            progress = await self._progress_repository.get_progress(user.id, lesson.id)
            completed = bool(progress and progress.is_completed)

        return PlayerLessonResponse(
            lesson=LessonResponse.model_validate(lesson),
            completed=completed,
            previous_lesson_id=lessons[index - 1].id if index > 0 else None,
            next_lesson_id=lessons[index + 1].id if index + 1 < len(lessons) else None,
        )

    async def set_lesson_completed(self, user: User, lesson_id: int, completed: bool) -> ProgressResponse:
        """
        Mark or unmark a lesson. Idempotent. Sets the enrollment's
        completed_at when every lesson is done and clears it otherwise.
        """
        lesson = await self._lesson_repository.get_by_id(lesson_id)
        if not lesson:
            raise ResourceNotFoundException(f"Lesson not found with ID: {lesson_id}")

        enrollment = await self._enrollment_repository.get_enrollment(user.id, lesson.course_id)
        if enrollment is None:
            raise AccessDeniedException("Enroll in this course to track progress")

        progress = await self._progress_repository.get_progress(user.id, lesson.id)
        if progress is None:
            progress = await self._progress_repository.add(
                {"user_id": user.id, "lesson_id": lesson.id, "is_completed": False}
            )
        if progress.is_completed != completed:
            progress.is_completed = completed
            progress.completed_at = utcnow() if completed else None
            await self._progress_repository.session.flush()

        total = await self._lesson_repository.count_by_course(lesson.course_id)
        completed_ids = await self._progress_repository.get_completed_lesson_ids(user.id, lesson.course_id)
        course_completed = total > 0 and len(completed_ids) >= total

        if course_completed and enrollment.completed_at is None:
            enrollment.completed_at = utcnow()
            logger.info(f"User {user.id} completed course {lesson.course_id}")
        elif not course_completed:
            enrollment.completed_at = None

        await self._progress_repository.commit()

        return ProgressResponse(
            lesson_id=lesson.id,
            completed=completed,
            completed_count=len(completed_ids),
            total_lessons=total,
            progress_percent=progress_percent(len(completed_ids), total),
            course_completed=course_completed,
        )
