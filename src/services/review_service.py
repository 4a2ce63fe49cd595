import logging
from typing import Optional

from src.model.enums import CourseStatus
from src.model.learning_models import Review
from src.model.user_models import User
from src.repositories.course_repo import CourseRepository
from src.repositories.enrollment_repo import EnrollmentRepository
from src.repositories.review_repo import ReviewRepository
from src.schemas.generic import Page
from src.schemas.learning import CreateReviewRequest, ReviewResponse
from src.services.course_service import can_manage
from src.utils.exceptions import AccessDeniedException, ResourceNotFoundException

logger = logging.getLogger(__name__)


def to_review_response(review: Review, reviewer_name: str) -> ReviewResponse:
    return ReviewResponse(
        id=review.id,
        course_id=review.course_id,
        user_id=review.user_id,
        reviewer_name=reviewer_name,
        rating=review.rating,
        comment=review.comment,
        created_date=review.created_date,
        updated_date=review.updated_date,
    )


class ReviewService:
    """Course reviews; one per enrolled learner, recomputing the course rating on write"""

    def __init__(
            self,
            review_repository: ReviewRepository,
            course_repository: CourseRepository,
            enrollment_repository: EnrollmentRepository,
    ):
        self._review_repository = review_repository
        self._course_repository = course_repository
        self._enrollment_repository = enrollment_repository

    async def upsert_review(self, user: User, course_id: int, request: CreateReviewRequest) -> ReviewResponse:
        course = await self._course_repository.get_by_id(course_id)
        if not course:
            raise ResourceNotFoundException(f"Course not found with ID: {course_id}")
        if not await self._enrollment_repository.is_enrolled(user.id, course.id):
            raise AccessDeniedException("Only enrolled learners can review this course")

        review = await self._review_repository.get_review(user.id, course.id)
        if review is None:
            review = await self._review_repository.add({
                "user_id": user.id,
                "course_id": course.id,
                "rating": request.rating,
                "comment": request.comment,
            })
        else:
            review.rating = request.rating
            review.comment = request.comment
            await self._review_repository.session.flush()

        course.rating, course.total_rating = await self._review_repository.get_rating_stats(course.id)
        await self._review_repository.commit()
        logger.info(
            f"User {user.id} rated course {course.id} {request.rating}/5 "
            f"(avg {course.rating:.2f} over {course.total_rating})"
        )
        return to_review_response(review, user.full_name)

    async def list_reviews(
            self, course_id: int, user: Optional[User] = None, page: int = 0, size: int = 20
    ) -> Page[ReviewResponse]:
        """Same visibility as the course page: unpublished courses only for whoever can manage them"""
        course = await self._course_repository.get_by_id(course_id)
        if not course or (course.status != CourseStatus.PUBLISHED and not can_manage(user, course)):
            raise ResourceNotFoundException(f"Course not found with ID: {course_id}")

        reviews, total = await self._review_repository.get_by_course(
            course.id, skip=page * size, limit=size
        )
        return Page[ReviewResponse](
            items=[to_review_response(r, r.user.full_name) for r in reviews],
            total=total,
            page=page,
            size=size,
        )
