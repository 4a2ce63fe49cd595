import logging

from fastapi import APIRouter, Depends, status

from src.dependencies.auth import get_current_user
from src.dependencies.services import get_auth_service
from src.model.user_models import User
from src.schemas.auth import LoginRequest, RegisterRequest, TokenResponse, UserResponse
from src.schemas.generic import ApiResponse
from src.services.auth_service import AuthService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post(
    "/register",
    response_model=ApiResponse[UserResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Register",
    description="Create a STUDENT or INSTRUCTOR account.",
)
async def register(
        request: RegisterRequest,
        auth_service: AuthService = Depends(get_auth_service),
) -> ApiResponse[UserResponse]:
    user = await auth_service.register(request)
    return ApiResponse[UserResponse].success(
        data=UserResponse.model_validate(user), message="Account created"
    )


@router.post(
    "/login",
    response_model=ApiResponse[TokenResponse],
    summary="Login",
    description="Exchange email and password for a bearer token.",
)
async def login(
        request: LoginRequest,
        auth_service: AuthService = Depends(get_auth_service),
) -> ApiResponse[TokenResponse]:
    user, token, expires_in = await auth_service.login(request)
    return ApiResponse[TokenResponse].success(
        data=TokenResponse(
            access_token=token,
            expires_in=expires_in,
            user=UserResponse.model_validate(user),
        ),
        message="Login successful",
    )


@router.get("/me", response_model=ApiResponse[UserResponse], summary="Current user")
async def me(user: User = Depends(get_current_user)) -> ApiResponse[UserResponse]:
    return ApiResponse[UserResponse].success(data=UserResponse.model_validate(user))
