"""
Checkout Service - paid course purchase through Stripe Checkout.

Flow:
    1. create_checkout: validate, lock (user, course), create the hosted
       session, store a PENDING Payment keyed by the session id
    2. The browser is redirected to the returned checkout_url
    3. handle_event: Stripe webhooks move the Payment to PAID/FAILED/EXPIRED;
       PAID enrolls the learner. Replays are no-ops.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from redis.exceptions import LockError

from src.clients.redis_client import RedisClient
from src.clients.stripe_client import StripeClient
from src.config import Settings
from src.model.base import utcnow
from src.model.enums import CourseStatus, PaymentStatus
from src.model.payment_models import Payment
from src.model.user_models import User
from src.repositories.course_repo import CourseRepository
from src.repositories.payment_repo import PaymentRepository
from src.schemas.checkout import CheckoutResponse, PaymentResponse
from src.services.enrollment_service import EnrollmentService
from src.utils.exceptions import BadRequestException, ResourceNotFoundException

logger = logging.getLogger(__name__)

# Stripe session payment_status values that mean the money is in
_PAID_SESSION_STATES = {"paid", "no_payment_required"}


@dataclass
class WebhookOutcome:
    event_type: str
    handled: bool
    payment: Optional[Payment] = None
    newly_enrolled: bool = False


class CheckoutService:

    def __init__(
            self,
            settings: Settings,
            stripe_client: StripeClient,
            redis_client: RedisClient,
            course_repository: CourseRepository,
            payment_repository: PaymentRepository,
            enrollment_service: EnrollmentService,
    ):
        self._settings = settings
        self._stripe_client = stripe_client
        self._redis_client = redis_client
        self._course_repository = course_repository
        self._payment_repository = payment_repository
        self._enrollment_service = enrollment_service

    async def create_checkout(self, user: User, course_id: int) -> CheckoutResponse:
        course = await self._course_repository.get_by_id(course_id)
        if not course or course.status != CourseStatus.PUBLISHED:
            raise ResourceNotFoundException(f"Course not found with ID: {course_id}")
        if course.is_free:
            raise BadRequestException(
                f"Course {course_id} is free. Use /courses/{course_id}/enroll instead."
            )
        if await self._enrollment_service.is_enrolled(user.id, course.id):
            raise BadRequestException("You are already enrolled in this course")

        try:
            async with self._redis_client.acquire_checkout_lock(user.id, course.id):
                session = await self._stripe_client.create_checkout_session(
                    course_id=course.id,
                    course_title=course.title,
                    amount=course.price,
                    currency=course.currency,
                    user_id=user.id,
                    customer_email=user.email,
                    success_url=self._settings.checkout_success_url,
                    cancel_url=self._settings.checkout_cancel_url,
                )
                await self._payment_repository.create({
                    "user_id": user.id,
                    "course_id": course.id,
                    "amount": course.price,
                    "currency": course.currency,
                    "provider_session_id": session["id"],
                    "status": PaymentStatus.PENDING,
                })
        except LockError:
            logger.warning(f"Checkout already in progress for user {user.id}, course {course.id}")
            raise BadRequestException("A checkout for this course is already in progress")

        logger.info(f"User {user.id} started checkout {session['id']} for course {course.id}")
        return CheckoutResponse(checkout_url=session["url"], session_id=session["id"])

    async def handle_event(self, event: Dict[str, Any]) -> WebhookOutcome:
        event_type = event.get("type", "")
        session = (event.get("data") or {}).get("object") or {}
        session_id = session.get("id")

        if event_type in ("checkout.session.completed", "checkout.session.async_payment_succeeded"):
            if event_type == "checkout.session.completed" and \
                    session.get("payment_status", "paid") not in _PAID_SESSION_STATES:
                # Delayed payment method; wait for async_payment_succeeded
                logger.info(f"Checkout {session_id} completed but not yet paid")
                return WebhookOutcome(event_type, handled=False)
            return await self._fulfill(event_type, session_id)

        if event_type == "checkout.session.async_payment_failed":
            return await self._close(event_type, session_id, PaymentStatus.FAILED)

        if event_type == "checkout.session.expired":
            return await self._close(event_type, session_id, PaymentStatus.EXPIRED)

        logger.debug(f"Ignoring webhook event {event_type}")
        return WebhookOutcome(event_type, handled=False)

    async def list_payments(self, user: User) -> List[PaymentResponse]:
        payments = await self._payment_repository.get_by_user(user.id)
        return [
            PaymentResponse.model_validate(p).model_copy(
                update={"course_title": p.course.title if p.course else None}
            )
            for p in payments
        ]

    async def _fulfill(self, event_type: str, session_id: Optional[str]) -> WebhookOutcome:
        payment = await self._find_payment(session_id)
        if payment is None:
            return WebhookOutcome(event_type, handled=False)
        if payment.status == PaymentStatus.PAID:
            logger.info(f"Payment {payment.id} already fulfilled")
            return WebhookOutcome(event_type, handled=True, payment=payment)

        course = await self._course_repository.get_by_id(payment.course_id, include_deleted=True)
        _, created = await self._enrollment_service.enroll(payment.user_id, course)

        payment.status = PaymentStatus.PAID
        payment.paid_at = utcnow()
        await self._payment_repository.commit()
        logger.info(f"Payment {payment.id} paid; user {payment.user_id} enrolled in course {course.id}")
        return WebhookOutcome(event_type, handled=True, payment=payment, newly_enrolled=created)

    async def _close(self, event_type: str, session_id: Optional[str], status: PaymentStatus) -> WebhookOutcome:
        payment = await self._find_payment(session_id)
        if payment is None:
            return WebhookOutcome(event_type, handled=False)
        if payment.status.is_final():
            return WebhookOutcome(event_type, handled=True, payment=payment)

        payment.status = status
        await self._payment_repository.commit()
        logger.info(f"Payment {payment.id} marked {status.value}")
        return WebhookOutcome(event_type, handled=True, payment=payment)

    async def _find_payment(self, session_id: Optional[str]) -> Optional[Payment]:
        if not session_id:
            return None
        payment = await self._payment_repository.get_by_session_id(session_id)
        if payment is None:
            logger.warning(f"Webhook for unknown checkout session {session_id}")
        return payment
