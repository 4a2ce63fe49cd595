import base64
import hashlib
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

import bcrypt
import jwt
from fastapi import Request

from src.config import Settings
from src.model.user_models import User
from src.repositories.user_repo import UserRepository
from src.schemas.auth import RegisterRequest, LoginRequest
from src.utils.exceptions import BadRequestException, UnauthorizedException

logger = logging.getLogger(__name__)


def _prehash(password: str) -> bytes:
    # SHA-256 first so passwords over bcrypt's 72-byte limit are not truncated
    digest = hashlib.sha256(password.encode("utf-8")).digest()
    return base64.b64encode(digest)


def hash_password(password: str) -> str:
    return bcrypt.hashpw(_prehash(password), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(_prehash(password), hashed.encode("utf-8"))
    except ValueError:
        return False


class AuthService:
    """Registration, login and bearer-token handling"""

    def __init__(self, user_repository: UserRepository, settings: Settings):
        self._user_repository = user_repository
        self._settings = settings

    async def register(self, request: RegisterRequest) -> User:
        if await self._user_repository.get_by_email(request.email):
            raise BadRequestException("Email is already registered")

        user = await self._user_repository.create({
            "email": request.email.lower(),
            "full_name": request.full_name.strip(),
            "password_hash": hash_password(request.password),
            "role": request.role,
        })
        logger.info(f"Registered user {user.id} with role {user.role.value}")
        return user

    async def login(self, request: LoginRequest) -> Tuple[User, str, int]:
        """
        Check credentials and issue an access token.

        Returns:
            (user, token, expires_in_seconds)
        """
        user = await self._user_repository.get_by_email(request.email)
        if not user or not verify_password(request.password, user.password_hash):
            raise UnauthorizedException("Invalid email or password")
        if not user.is_active:
            raise UnauthorizedException("Account is disabled")

        token, expires_in = self.create_access_token(user)
        logger.info(f"User {user.id} logged in")
        return user, token, expires_in

    def create_access_token(self, user: User) -> Tuple[str, int]:
        expires_in = self._settings.access_token_expire_minutes * 60
        now = datetime.now(timezone.utc)
        claims = {
            "sub": str(user.id),
            "userId": user.id,
            "email": user.email,
            "fullName": user.full_name,
            "roles": [user.role.value],
            "iat": now,
            "exp": now + timedelta(seconds=expires_in),
        }
        token = jwt.encode(
            claims, self._settings.jwt_secret, algorithm=self._settings.jwt_algorithm
        )
        return token, expires_in

    @staticmethod
    def decode_token(token: str, settings: Settings) -> dict:
        try:
            return jwt.decode(
                token,
                settings.jwt_secret,
                algorithms=[settings.jwt_algorithm],
            )
        except jwt.ExpiredSignatureError:
            raise UnauthorizedException("Token has expired")
        except jwt.InvalidTokenError:
            raise UnauthorizedException("Invalid token")

    @staticmethod
    def get_bearer_token(request: Request) -> Optional[str]:
        """
        Extract the token from "Authorization: Bearer <token>".

        Returns None when the header is absent; raises when it is malformed.
        """
        auth_header = request.headers.get("Authorization")
        if not auth_header:
            return None
        scheme, _, token = auth_header.partition(" ")
        if scheme.lower() != "bearer" or not token.strip():
            raise UnauthorizedException("Invalid Authorization header format")
        return token.strip()
