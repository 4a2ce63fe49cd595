import logging
from functools import lru_cache

from fastapi import Depends

from src.clients.redis_client import RedisClient
from src.clients.stripe_client import StripeClient
from src.config import get_settings
from src.dependencies.repositories import (
    get_course_repository,
    get_enrollment_repository,
    get_lesson_repository,
    get_payment_repository,
    get_progress_repository,
    get_review_repository,
    get_user_repository,
)
from src.repositories import (
    CourseRepository,
    EnrollmentRepository,
    LessonRepository,
    PaymentRepository,
    ProgressRepository,
    ReviewRepository,
    UserRepository,
)
from src.services.auth_service import AuthService
from src.services.checkout_service import CheckoutService
from src.services.course_service import CourseService
from src.services.enrollment_service import EnrollmentService
from src.services.player_service import PlayerService
from src.services.review_service import ReviewService
from src.services.task_service import EmailTask

logger = logging.getLogger(__name__)

# =============================
#   Redis Client (Singleton)
# =============================
_redis_client_instance = None


async def get_redis_client() -> RedisClient:
    """
    Get singleton RedisClient instance.
    Connection is established on first call and reused.
    """
    global _redis_client_instance

    if _redis_client_instance is None:
        settings = get_settings()
        _redis_client_instance = RedisClient(settings)
        await _redis_client_instance.connect()
        logger.info("RedisClient singleton created")

    return _redis_client_instance


# =============================
#   Stripe Client (Singleton)
# =============================
@lru_cache()
def get_stripe_client() -> StripeClient:
    return StripeClient(get_settings())


# =============================
#   Task Dependencies
# =============================
async def get_email_task(
        redis_client: RedisClient = Depends(get_redis_client),
) -> EmailTask:
    return EmailTask(redis_client=redis_client)


# =============================
#   Services (Per-Request)
# =============================
async def get_auth_service(
        user_repository: UserRepository = Depends(get_user_repository),
) -> AuthService:
    return AuthService(user_repository, get_settings())


async def get_course_service(
        course_repository: CourseRepository = Depends(get_course_repository),
        lesson_repository: LessonRepository = Depends(get_lesson_repository),
) -> CourseService:
    return CourseService(course_repository, lesson_repository)


async def get_enrollment_service(
        enrollment_repository: EnrollmentRepository = Depends(get_enrollment_repository),
        course_repository: CourseRepository = Depends(get_course_repository),
        progress_repository: ProgressRepository = Depends(get_progress_repository),
) -> EnrollmentService:
    return EnrollmentService(enrollment_repository, course_repository, progress_repository)


async def get_player_service(
        course_repository: CourseRepository = Depends(get_course_repository),
        lesson_repository: LessonRepository = Depends(get_lesson_repository),
        enrollment_repository: EnrollmentRepository = Depends(get_enrollment_repository),
        progress_repository: ProgressRepository = Depends(get_progress_repository),
) -> PlayerService:
    return PlayerService(
        course_repository, lesson_repository, enrollment_repository, progress_repository
    )


async def get_review_service(
        review_repository: ReviewRepository = Depends(get_review_repository),
        course_repository: CourseRepository = Depends(get_course_repository),
        enrollment_repository: EnrollmentRepository = Depends(get_enrollment_repository),
) -> ReviewService:
    return ReviewService(review_repository, course_repository, enrollment_repository)


async def get_checkout_service(
        stripe_client: StripeClient = Depends(get_stripe_client),
        redis_client: RedisClient = Depends(get_redis_client),
        course_repository: CourseRepository = Depends(get_course_repository),
        payment_repository: PaymentRepository = Depends(get_payment_repository),
        enrollment_service: EnrollmentService = Depends(get_enrollment_service),
) -> CheckoutService:
    """
    Dependencies:
        - StripeClient: hosted checkout session creation
        - RedisClient: per-(user, course) checkout lock
        - EnrollmentService: fulfillment on successful payment
    """
    return CheckoutService(
        settings=get_settings(),
        stripe_client=stripe_client,
        redis_client=redis_client,
        course_repository=course_repository,
        payment_repository=payment_repository,
        enrollment_service=enrollment_service,
    )
