"""
Enums shared by models and schemas
"""
from enum import Enum


class UserRole(str, Enum):
    """Account role"""
    STUDENT = "STUDENT"
    INSTRUCTOR = "INSTRUCTOR"
    ADMIN = "ADMIN"


class CourseLevel(str, Enum):
    """Course difficulty level"""
    BEGINNER = "BEGINNER"
    INTERMEDIATE = "INTERMEDIATE"
    ADVANCED = "ADVANCED"


class CourseStatus(str, Enum):
    """Course publication status"""
    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"
    ARCHIVED = "ARCHIVED"


class LessonType(str, Enum):
    """Type of lesson content"""
    VIDEO = "VIDEO"
    READING = "READING"


class PaymentStatus(str, Enum):
    """Lifecycle of a checkout payment"""
    PENDING = "PENDING"
    PAID = "PAID"
    FAILED = "FAILED"
    EXPIRED = "EXPIRED"

    def is_final(self) -> bool:
        return self != PaymentStatus.PENDING


class CourseSort(str, Enum):
    """Sort orders for the course catalog"""
    NEWEST = "newest"
    RATING = "rating"
    POPULAR = "popular"
    PRICE_ASC = "price_asc"
    PRICE_DESC = "price_desc"
