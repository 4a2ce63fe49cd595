import logging
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query, status

from src.dependencies.auth import get_current_user, get_optional_user
from src.dependencies.services import (
    get_course_service,
    get_email_task,
    get_enrollment_service,
    get_review_service,
)
from src.model.enums import CourseLevel, CourseSort
from src.model.user_models import User
from src.schemas.course import CourseDetail, CourseSummary
from src.schemas.generic import ApiResponse, Page
from src.schemas.learning import CreateReviewRequest, EnrollmentResponse, ReviewResponse
from src.services.course_service import CourseService
from src.services.enrollment_service import EnrollmentService
from src.services.review_service import ReviewService
from src.services.task_service import EmailTask

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/courses", tags=["Courses"])


@router.get(
    "",
    response_model=ApiResponse[Page[CourseSummary]],
    summary="Course catalog",
    description="Published courses with keyword/level/price filters, sorting and paging.",
)
async def list_courses(
        keyword: Optional[str] = Query(None, max_length=200),
        level: Optional[CourseLevel] = Query(None),
        free: Optional[bool] = Query(None, description="true = free only, false = paid only"),
        sort: CourseSort = Query(CourseSort.NEWEST),
        page: int = Query(0, ge=0),
        size: int = Query(12, ge=1, le=100),
        course_service: CourseService = Depends(get_course_service),
) -> ApiResponse[Page[CourseSummary]]:
    result = await course_service.list_catalog(
        keyword=keyword, level=level, free=free, sort=sort, page=page, size=size
    )
    return ApiResponse[Page[CourseSummary]].success(data=result)


@router.get(
    "/{slug}",
    response_model=ApiResponse[CourseDetail],
    summary="Course detail",
    description="Course landing page data with its lesson outline.",
)
async def get_course(
        slug: str,
        user: Optional[User] = Depends(get_optional_user),
        course_service: CourseService = Depends(get_course_service),
) -> ApiResponse[CourseDetail]:
    detail = await course_service.get_course_detail(slug, user)
    return ApiResponse[CourseDetail].success(data=detail)


@router.post(
    "/{course_id}/enroll",
    response_model=ApiResponse[EnrollmentResponse],
    summary="Enroll in a free course",
)
async def enroll(
        course_id: int,
        background_tasks: BackgroundTasks,
        user: User = Depends(get_current_user),
        enrollment_service: EnrollmentService = Depends(get_enrollment_service),
        email_task: EmailTask = Depends(get_email_task),
) -> ApiResponse[EnrollmentResponse]:
    enrollment, course, created = await enrollment_service.enroll_free(user, course_id)
    if created:
        background_tasks.add_task(
            email_task.send_course_welcome,
            to=user.email,
            full_name=user.full_name,
            course_title=course.title,
            course_slug=course.slug,
        )
    return ApiResponse[EnrollmentResponse].success(
        data=EnrollmentResponse.model_validate(enrollment),
        message="Enrolled successfully" if created else "Already enrolled",
    )


@router.post(
    "/{course_id}/reviews",
    response_model=ApiResponse[ReviewResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Review a course",
    description="Create or replace the caller's review. Requires enrollment.",
)
async def review_course(
        course_id: int,
        request: CreateReviewRequest,
        user: User = Depends(get_current_user),
        review_service: ReviewService = Depends(get_review_service),
) -> ApiResponse[ReviewResponse]:
    review = await review_service.upsert_review(user, course_id, request)
    return ApiResponse[ReviewResponse].success(data=review, message="Review saved")


@router.get(
    "/{course_id}/reviews",
    response_model=ApiResponse[Page[ReviewResponse]],
    summary="Course reviews",
)
async def list_reviews(
        course_id: int,
        page: int = Query(0, ge=0),
        size: int = Query(20, ge=1, le=100),
        user: Optional[User] = Depends(get_optional_user),
        review_service: ReviewService = Depends(get_review_service),
) -> ApiResponse[Page[ReviewResponse]]:
    reviews = await review_service.list_reviews(course_id, user, page=page, size=size)
    return ApiResponse[Page[ReviewResponse]].success(data=reviews)
