"""
Model package - Database models and enums
"""
from src.model.base import Base, BaseMixin, TimestampMixin, SoftDeleteMixin
from src.model.enums import (
    UserRole,
    CourseLevel,
    CourseStatus,
    LessonType,
    PaymentStatus,
    CourseSort,
)
from src.model.user_models import User
from src.model.course_models import Course, Lesson
from src.model.learning_models import Enrollment, Progress, Review
from src.model.payment_models import Payment

__all__ = [
    # Base classes
    'Base',
    'BaseMixin',
    'TimestampMixin',
    'SoftDeleteMixin',
    # Enums
    'UserRole',
    'CourseLevel',
    'CourseStatus',
    'LessonType',
    'PaymentStatus',
    'CourseSort',
    # Models
    'User',
    'Course',
    'Lesson',
    'Enrollment',
    'Progress',
    'Review',
    'Payment',
]
