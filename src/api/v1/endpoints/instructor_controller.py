import logging
from typing import List

from fastapi import APIRouter, Depends, status

from src.dependencies.auth import require_author
from src.dependencies.services import get_course_service
from src.model.user_models import User
from src.schemas.course import (
    CourseSummary,
    CreateCourseRequest,
    CreateLessonRequest,
    LessonResponse,
    UpdateCourseRequest,
    UpdateLessonRequest,
)
from src.schemas.generic import ApiResponse
from src.services.course_service import CourseService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/instructor", tags=["Instructor"])


@router.get("/courses", response_model=ApiResponse[List[CourseSummary]], summary="My authored courses")
async def list_my_courses(
        user: User = Depends(require_author),
        course_service: CourseService = Depends(get_course_service),
) -> ApiResponse[List[CourseSummary]]:
    courses = await course_service.list_instructor_courses(user)
    return ApiResponse[List[CourseSummary]].success(data=courses)


@router.post(
    "/courses",
    response_model=ApiResponse[CourseSummary],
    status_code=status.HTTP_201_CREATED,
    summary="Create a draft course",
)
async def create_course(
        request: CreateCourseRequest,
        user: User = Depends(require_author),
        course_service: CourseService = Depends(get_course_service),
) -> ApiResponse[CourseSummary]:
    course = await course_service.create_course(user, request)
    return ApiResponse[CourseSummary].success(
        data=CourseSummary.model_validate(course), message="Course created"
    )


@router.put("/courses/{course_id}", response_model=ApiResponse[CourseSummary], summary="Update a course")
async def update_course(
        course_id: int,
        request: UpdateCourseRequest,
        user: User = Depends(require_author),
        course_service: CourseService = Depends(get_course_service),
) -> ApiResponse[CourseSummary]:
    course = await course_service.update_course(user, course_id, request)
    return ApiResponse[CourseSummary].success(data=CourseSummary.model_validate(course))


@router.post(
    "/courses/{course_id}/publish",
    response_model=ApiResponse[CourseSummary],
    summary="Publish a course",
    description="Requires at least one lesson.",
)
async def publish_course(
        course_id: int,
        user: User = Depends(require_author),
        course_service: CourseService = Depends(get_course_service),
) -> ApiResponse[CourseSummary]:
    course = await course_service.publish_course(user, course_id)
    return ApiResponse[CourseSummary].success(
        data=CourseSummary.model_validate(course), message="Course published"
    )


@router.post("/courses/{course_id}/archive", response_model=ApiResponse[CourseSummary], summary="Archive a course")
async def archive_course(
        course_id: int,
        user: User = Depends(require_author),
        course_service: CourseService = Depends(get_course_service),
) -> ApiResponse[CourseSummary]:
    course = await course_service.archive_course(user, course_id)
    return ApiResponse[CourseSummary].success(
        data=CourseSummary.model_validate(course), message="Course archived"
    )


@router.post(
    "/courses/{course_id}/lessons",
    response_model=ApiResponse[LessonResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Add a lesson",
)
async def add_lesson(
        course_id: int,
        request: CreateLessonRequest,
        user: User = Depends(require_author),
        course_service: CourseService = Depends(get_course_service),
) -> ApiResponse[LessonResponse]:
    lesson = await course_service.add_lesson(user, course_id, request)
    return ApiResponse[LessonResponse].success(
        data=LessonResponse.model_validate(lesson), message="Lesson added"
    )


@router.put("/lessons/{lesson_id}", response_model=ApiResponse[LessonResponse], summary="Update a lesson")
async def update_lesson(
        lesson_id: int,
        request: UpdateLessonRequest,
        user: User = Depends(require_author),
        course_service: CourseService = Depends(get_course_service),
) -> ApiResponse[LessonResponse]:
    lesson = await course_service.update_lesson(user, lesson_id, request)
    return ApiResponse[LessonResponse].success(data=LessonResponse.model_validate(lesson))


@router.delete("/lessons/{lesson_id}", response_model=ApiResponse, summary="Delete a lesson")
async def delete_lesson(
        lesson_id: int,
        user: User = Depends(require_author),
        course_service: CourseService = Depends(get_course_service),
) -> ApiResponse:
    await course_service.delete_lesson(user, lesson_id)
    return ApiResponse.success(message="Lesson deleted")
