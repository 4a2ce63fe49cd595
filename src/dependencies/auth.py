"""
Authentication dependencies: resolve the bearer token to a User
"""
from typing import Optional

from fastapi import Depends, Request

from src.config import get_settings
from src.dependencies.repositories import get_user_repository
from src.model.enums import UserRole
from src.model.user_models import User
from src.repositories.user_repo import UserRepository
from src.services.auth_service import AuthService
from src.utils.exceptions import AccessDeniedException, UnauthorizedException


async def _load_user(token: str, user_repository: UserRepository) -> User:
    claims = AuthService.decode_token(token, get_settings())

    user_id = claims.get("userId")
    if not isinstance(user_id, int):
        raise UnauthorizedException("Invalid token")

    user = await user_repository.get_by_id(user_id)
    if not user or not user.is_active:
        raise UnauthorizedException("User not found or disabled")
    return user


async def get_current_user(
        request: Request,
        user_repository: UserRepository = Depends(get_user_repository),
) -> User:
    token = AuthService.get_bearer_token(request)
    if not token:
        raise UnauthorizedException("Authorization header missing")
    return await _load_user(token, user_repository)


async def get_optional_user(
        request: Request,
        user_repository: UserRepository = Depends(get_user_repository),
) -> Optional[User]:
    """Anonymous access allowed; a header that is present must still be valid"""
    token = AuthService.get_bearer_token(request)
    if not token:
        return None
    return await _load_user(token, user_repository)


def require_roles(*roles: UserRole):
    """Dependency factory: the current user must hold one of the roles"""

    async def checker(user: User = Depends(get_current_user)) -> User:
        if user.role not in roles:
            raise AccessDeniedException("You do not have permission to perform this action")
        return user

    return checker


require_author = require_roles(UserRole.INSTRUCTOR, UserRole.ADMIN)
