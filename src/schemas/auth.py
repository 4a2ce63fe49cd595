from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from src.model.enums import UserRole


# =============================
#   Request Schemas
# =============================
class RegisterRequest(BaseModel):
    """Sign-up payload. ADMIN accounts cannot be self-registered."""

    email: EmailStr
    full_name: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=8, max_length=128)
    role: UserRole = Field(default=UserRole.STUDENT)

    @field_validator("role")
    @classmethod
    def no_self_admin(cls, value: UserRole) -> UserRole:
        if value == UserRole.ADMIN:
            raise ValueError("ADMIN role cannot be self-assigned")
        return value


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


# =============================
#   Response Schemas
# =============================
class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    full_name: str
    role: UserRole
    is_active: bool


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int = Field(..., description="Lifetime in seconds")
    user: Optional[UserResponse] = None
