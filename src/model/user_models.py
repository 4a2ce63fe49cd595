from sqlalchemy import Column, String, Boolean, Enum as SQLEnum

from src.model.base import Base, BaseMixin
from src.model.enums import UserRole


class User(Base, BaseMixin):
    """
    Account for learners, instructors and admins
    """

    __tablename__ = "users"

    email = Column(String(255), unique=True, nullable=False, index=True)
    full_name = Column(String(255), nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(
        SQLEnum(UserRole, name="user_role"),
        default=UserRole.STUDENT,
        nullable=False,
    )
    is_active = Column(Boolean, default=True, nullable=False)

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"
