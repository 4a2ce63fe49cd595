import logging

from fastapi import APIRouter, BackgroundTasks, Depends, Request

from src.dependencies.auth import get_current_user
from src.dependencies.services import get_checkout_service, get_email_task, get_stripe_client
from src.clients.stripe_client import StripeClient
from src.model.enums import PaymentStatus
from src.model.user_models import User
from src.schemas.checkout import CheckoutResponse, WebhookAck
from src.schemas.generic import ApiResponse
from src.services.checkout_service import CheckoutService
from src.services.task_service import EmailTask

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/checkout", tags=["Checkout"])


@router.post(
    "/webhook",
    response_model=ApiResponse[WebhookAck],
    summary="Stripe webhook",
    description="Receives signed Stripe events. Fulfillment is idempotent.",
)
async def stripe_webhook(
        request: Request,
        background_tasks: BackgroundTasks,
        stripe_client: StripeClient = Depends(get_stripe_client),
        checkout_service: CheckoutService = Depends(get_checkout_service),
        email_task: EmailTask = Depends(get_email_task),
) -> ApiResponse[WebhookAck]:
    payload = await request.body()
    event = stripe_client.construct_event(payload, request.headers.get("Stripe-Signature"))
    logger.info(f"Received Stripe event {event.get('id')} ({event.get('type')})")

    outcome = await checkout_service.handle_event(event)

    payment = outcome.payment
    if outcome.newly_enrolled and payment is not None and payment.status == PaymentStatus.PAID:
        background_tasks.add_task(
            email_task.send_purchase_receipt,
            to=payment.user.email,
            full_name=payment.user.full_name,
            course_title=payment.course.title,
            amount=payment.amount,
            currency=payment.currency,
        )

    return ApiResponse[WebhookAck].success(
        data=WebhookAck(event_type=outcome.event_type, handled=outcome.handled)
    )


@router.post(
    "/{course_id}",
    response_model=ApiResponse[CheckoutResponse],
    summary="Start checkout",
    description="Create a hosted Stripe Checkout Session; redirect the browser to checkout_url.",
)
async def create_checkout(
        course_id: int,
        user: User = Depends(get_current_user),
        checkout_service: CheckoutService = Depends(get_checkout_service),
) -> ApiResponse[CheckoutResponse]:
    checkout = await checkout_service.create_checkout(user, course_id)
    return ApiResponse[CheckoutResponse].success(data=checkout, message="Checkout session created")
