"""
Course Service - public catalog and instructor authoring.

Catalog reads only ever see PUBLISHED, non-deleted courses. Authoring
operations are restricted to the course's instructor or an admin, and
keep the course's total_lesson counter in step with its live lessons.
"""

import logging
from typing import List, Optional

from slugify import slugify

from src.model.course_models import Course, Lesson
from src.model.enums import CourseLevel, CourseSort, CourseStatus, UserRole
from src.model.user_models import User
from src.repositories.course_repo import CourseRepository
from src.repositories.lesson_repo import LessonRepository
from src.schemas.course import (
    CourseDetail,
    CourseSummary,
    CreateCourseRequest,
    CreateLessonRequest,
    LessonOutline,
    UpdateCourseRequest,
    UpdateLessonRequest,
)
from src.schemas.generic import Page
from src.utils.exceptions import (
    AccessDeniedException,
    BadRequestException,
    ResourceNotFoundException,
)

logger = logging.getLogger(__name__)


def can_manage(user: Optional[User], course: Course) -> bool:
    """Instructor of the course, or an admin"""
    if user is None:
        return False
    return user.role == UserRole.ADMIN or course.instructor_id == user.id


class CourseService:

    SLUG_MAX_LENGTH = 200

    def __init__(self, course_repository: CourseRepository, lesson_repository: LessonRepository):
        self._course_repository = course_repository
        self._lesson_repository = lesson_repository

    # =============================
    #   Catalog
    # =============================
    async def list_catalog(
            self,
            keyword: Optional[str] = None,
            level: Optional[CourseLevel] = None,
            free: Optional[bool] = None,
            sort: CourseSort = CourseSort.NEWEST,
            page: int = 0,
            size: int = 12,
    ) -> Page[CourseSummary]:
        courses, total = await self._course_repository.search_published(
            keyword=keyword,
            level=level,
            free=free,
            sort=sort,
            skip=page * size,
            limit=size,
        )
        return Page[CourseSummary](
            items=[CourseSummary.model_validate(c) for c in courses],
            total=total,
            page=page,
            size=size,
        )

    async def get_visible_course_by_slug(self, slug: str, user: Optional[User]) -> Course:
        """
        Published courses are visible to everyone; others only to whoever
        can manage them. Anything else is reported as not found.
        """
        course = await self._course_repository.get_by_slug(slug)
        if not course or (course.status != CourseStatus.PUBLISHED and not can_manage(user, course)):
            raise ResourceNotFoundException(f"Course not found: {slug}")
        return course

    async def get_course_detail(self, slug: str, user: Optional[User]) -> CourseDetail:
        course = await self.get_visible_course_by_slug(slug, user)
        lessons = await self._lesson_repository.get_lessons_by_course_id(course.id)
        return build_course_detail(course, lessons)

    # =============================
    #   Authoring
    # =============================
    async def list_instructor_courses(self, user: User) -> List[CourseSummary]:
        courses = await self._course_repository.get_by_instructor(user.id)
        return [CourseSummary.model_validate(c) for c in courses]

    async def create_course(self, user: User, request: CreateCourseRequest) -> Course:
        slug = await self.generate_unique_slug(request.title)
        course = await self._course_repository.create({
            **request.model_dump(),
            "currency": request.currency.lower(),
            "slug": slug,
            "status": CourseStatus.DRAFT,
            "instructor_id": user.id,
        })
        await self._course_repository.refresh(course, ["instructor"])
        logger.info(f"Instructor {user.id} created course {course.id} ({slug})")
        return course

    async def update_course(self, user: User, course_id: int, request: UpdateCourseRequest) -> Course:
        course = await self.get_managed_course(user, course_id)
        changes = request.model_dump(exclude_unset=True, exclude_none=True)
        if "currency" in changes:
            changes["currency"] = changes["currency"].lower()
        return await self._course_repository.update(course, changes)

    async def publish_course(self, user: User, course_id: int) -> Course:
        course = await self.get_managed_course(user, course_id)
        if await self._lesson_repository.count_by_course(course.id) == 0:
            raise BadRequestException("A course needs at least one lesson before it can be published")
        logger.info(f"Publishing course {course.id}")
        return await self._course_repository.update(course, {"status": CourseStatus.PUBLISHED})

    async def archive_course(self, user: User, course_id: int) -> Course:
        course = await self.get_managed_course(user, course_id)
        logger.info(f"Archiving course {course.id}")
        return await self._course_repository.update(course, {"status": CourseStatus.ARCHIVED})

    async def add_lesson(self, user: User, course_id: int, request: CreateLessonRequest) -> Lesson:
        course = await self.get_managed_course(user, course_id)

        data = request.model_dump()
        if data["order_index"] is None:
            max_index = await self._lesson_repository.get_max_order_index(course.id)
            data["order_index"] = 0 if max_index is None else max_index + 1

        lesson = await self._lesson_repository.add({**data, "course_id": course.id})
        await self._sync_lesson_count(course)
        await self._lesson_repository.refresh(lesson)
        logger.info(f"Added lesson {lesson.id} to course {course.id}")
        return lesson

    async def update_lesson(self, user: User, lesson_id: int, request: UpdateLessonRequest) -> Lesson:
        lesson = await self._get_managed_lesson(user, lesson_id)
        changes = request.model_dump(exclude_unset=True, exclude_none=True)
        return await self._lesson_repository.update(lesson, changes)

    async def delete_lesson(self, user: User, lesson_id: int) -> None:
        lesson = await self._get_managed_lesson(user, lesson_id)
        course = await self._course_repository.get_by_id(lesson.course_id)
        if (
                course.status == CourseStatus.PUBLISHED
                and await self._lesson_repository.count_by_course(course.id) <= 1
        ):
            raise BadRequestException("A published course must keep at least one lesson")
        await self._lesson_repository.delete(lesson)
        await self._sync_lesson_count(course)
        logger.info(f"Deleted lesson {lesson_id} from course {course.id}")

    # =============================
    #   Helpers
    # =============================
    async def get_managed_course(self, user: User, course_id: int) -> Course:
        course = await self._course_repository.get_by_id(course_id)
        if not course:
            raise ResourceNotFoundException(f"Course not found with ID: {course_id}")
        if not can_manage(user, course):
            raise AccessDeniedException("You do not have permission to modify this course")
        return course

    async def _get_managed_lesson(self, user: User, lesson_id: int) -> Lesson:
        lesson = await self._lesson_repository.get_by_id(lesson_id)
        if not lesson:
            raise ResourceNotFoundException(f"Lesson not found with ID: {lesson_id}")
        await self.get_managed_course(user, lesson.course_id)
        return lesson

    async def _sync_lesson_count(self, course: Course) -> None:
        course.total_lesson = await self._lesson_repository.count_by_course(course.id)
        await self._course_repository.commit()

    async def generate_unique_slug(self, title: str) -> str:
        """
        Slugify the title; on collision append -1, -2, ... until free.
        Soft-deleted courses still hold their slug.
        """
        base_slug = slugify(title, max_length=self.SLUG_MAX_LENGTH) or "course"
        taken = await self._course_repository.get_slugs_with_prefix(base_slug)

        slug = base_slug
        counter = 1
        while slug in taken:
            slug = f"{base_slug}-{counter}"
            counter += 1
        return slug


def build_course_detail(course: Course, lessons) -> CourseDetail:
    summary = CourseSummary.model_validate(course)
    return CourseDetail(
        **summary.model_dump(),
        lessons=[LessonOutline.model_validate(lesson) for lesson in lessons],
    )
