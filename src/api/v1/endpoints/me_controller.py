from typing import List

from fastapi import APIRouter, Depends

from src.dependencies.auth import get_current_user
from src.dependencies.services import get_checkout_service, get_enrollment_service
from src.model.user_models import User
from src.schemas.checkout import PaymentResponse
from src.schemas.generic import ApiResponse
from src.schemas.learning import MyCourseResponse
from src.services.checkout_service import CheckoutService
from src.services.enrollment_service import EnrollmentService

router = APIRouter(prefix="/me", tags=["Me"])


@router.get("/courses", response_model=ApiResponse[List[MyCourseResponse]], summary="My enrolled courses")
async def my_courses(
        user: User = Depends(get_current_user),
        enrollment_service: EnrollmentService = Depends(get_enrollment_service),
) -> ApiResponse[List[MyCourseResponse]]:
    courses = await enrollment_service.list_my_courses(user)
    return ApiResponse[List[MyCourseResponse]].success(data=courses)


@router.get("/payments", response_model=ApiResponse[List[PaymentResponse]], summary="My payments")
async def my_payments(
        user: User = Depends(get_current_user),
        checkout_service: CheckoutService = Depends(get_checkout_service),
) -> ApiResponse[List[PaymentResponse]]:
    payments = await checkout_service.list_payments(user)
    return ApiResponse[List[PaymentResponse]].success(data=payments)
