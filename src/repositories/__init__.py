"""
Repository package - Data access layer
"""

from src.repositories.base_repo import BaseRepository
from src.repositories.user_repo import UserRepository
from src.repositories.course_repo import CourseRepository
from src.repositories.lesson_repo import LessonRepository
from src.repositories.enrollment_repo import EnrollmentRepository
from src.repositories.progress_repo import ProgressRepository
from src.repositories.review_repo import ReviewRepository
from src.repositories.payment_repo import PaymentRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "CourseRepository",
    "LessonRepository",
    "EnrollmentRepository",
    "ProgressRepository",
    "ReviewRepository",
    "PaymentRepository",
]
