"""
Repository dependency injection

Each repository shares the request's session, so writes from several
repositories commit together.
"""
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.dependencies.db import get_database
from src.repositories import (
    CourseRepository,
    EnrollmentRepository,
    LessonRepository,
    PaymentRepository,
    ProgressRepository,
    ReviewRepository,
    UserRepository,
)


async def get_user_repository(session: AsyncSession = Depends(get_database)) -> UserRepository:
    return UserRepository(session)


async def get_course_repository(session: AsyncSession = Depends(get_database)) -> CourseRepository:
    return CourseRepository(session)


async def get_lesson_repository(session: AsyncSession = Depends(get_database)) -> LessonRepository:
    return LessonRepository(session)


async def get_enrollment_repository(session: AsyncSession = Depends(get_database)) -> EnrollmentRepository:
    return EnrollmentRepository(session)


async def get_progress_repository(session: AsyncSession = Depends(get_database)) -> ProgressRepository:
    return ProgressRepository(session)


async def get_review_repository(session: AsyncSession = Depends(get_database)) -> ReviewRepository:
    return ReviewRepository(session)


async def get_payment_repository(session: AsyncSession = Depends(get_database)) -> PaymentRepository:
    return PaymentRepository(session)
