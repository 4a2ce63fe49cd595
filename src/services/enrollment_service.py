import logging
from typing import List, Tuple

from sqlalchemy.exc import IntegrityError

from src.model.course_models import Course
from src.model.enums import CourseStatus
from src.model.learning_models import Enrollment
from src.model.user_models import User
from src.repositories.course_repo import CourseRepository
from src.repositories.enrollment_repo import EnrollmentRepository
from src.repositories.progress_repo import ProgressRepository
from src.schemas.course import CourseSummary
from src.schemas.learning import EnrollmentResponse, MyCourseResponse
from src.utils.exceptions import BadRequestException, ResourceNotFoundException

logger = logging.getLogger(__name__)


def progress_percent(completed: int, total: int) -> int:
    """Whole-number percentage, rounded half up; 0 for an empty course"""
    if total <= 0:
        return 0
    completed = min(completed, total)
    return (100 * completed + total // 2) // total


class EnrollmentService:

    def __init__(
            self,
            enrollment_repository: EnrollmentRepository,
            course_repository: CourseRepository,
            progress_repository: ProgressRepository,
    ):
        self._enrollment_repository = enrollment_repository
        self._course_repository = course_repository
        self._progress_repository = progress_repository

    async def enroll_free(self, user: User, course_id: int) -> Tuple[Enrollment, Course, bool]:
        """
        Enroll in a free published course.

        Returns:
            (enrollment, course, created) where created is False for a repeat
        """
        course = await self._course_repository.get_by_id(course_id)
        if not course or course.status != CourseStatus.PUBLISHED:
            raise ResourceNotFoundException(f"Course not found with ID: {course_id}")
        if not course.is_free:
            raise BadRequestException(
                f"Course {course_id} is a paid course. Use /checkout/{course_id} to purchase it."
            )

        enrollment, created = await self.enroll(user.id, course)
        return enrollment, course, created

    async def enroll(self, user_id: int, course: Course) -> Tuple[Enrollment, bool]:
        """
        Create the enrollment if missing and refresh the course's student count.
        Commits on its own; safe to call repeatedly.
        """
        existing = await self._enrollment_repository.get_enrollment(user_id, course.id)
        if existing:
            return existing, False

        try:
            enrollment = await self._enrollment_repository.add(
                {"user_id": user_id, "course_id": course.id}
            )
            course.total_student = await self._enrollment_repository.count_by_course(course.id)
            await self._enrollment_repository.commit()
        except IntegrityError:
            # Lost a race with a concurrent enrollment of the same pair
            await self._enrollment_repository.session.rollback()
            await self._course_repository.refresh(course)
            existing = await self._enrollment_repository.get_enrollment(user_id, course.id)
            if existing is None:
                raise
            return existing, False

        logger.info(f"User {user_id} enrolled in course {course.id}")
        return enrollment, True

    async def is_enrolled(self, user_id: int, course_id: int) -> bool:
        return await self._enrollment_repository.is_enrolled(user_id, course_id)

    async def list_my_courses(self, user: User) -> List[MyCourseResponse]:
        enrollments = await self._enrollment_repository.get_by_user(user.id)

        result = []
        for enrollment in enrollments:
            course = enrollment.course
            if course is None or course.is_deleted:
                continue
            completed = await self._progress_repository.get_completed_lesson_ids(user.id, course.id)
            result.append(
                MyCourseResponse(
                    enrollment=EnrollmentResponse.model_validate(enrollment),
                    course=CourseSummary.model_validate(course),
                    progress_percent=progress_percent(len(completed), course.total_lesson),
                )
            )
        return result
