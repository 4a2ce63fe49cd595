"""
Course catalog models
"""

from sqlalchemy import (
    Column,
    String,
    Text,
    Enum as SQLEnum,
    Float,
    Integer,
    Boolean,
    ForeignKey,
)
from sqlalchemy.orm import relationship

from src.model.base import Base, BaseMixin, SoftDeleteMixin
from src.model.enums import CourseLevel, CourseStatus, LessonType


class Course(Base, BaseMixin, SoftDeleteMixin):
    """
    A course owned by one instructor. Price is in minor currency units; 0 means free.
    """

    __tablename__ = "courses"

    title = Column(String(255), nullable=False)
    slug = Column(String(255), unique=True, nullable=False, index=True)
    description = Column(Text, nullable=True)
    thumbnail_url = Column(String(500), nullable=True)
    price = Column(Integer, default=0, nullable=False)
    currency = Column(String(3), default="usd", nullable=False)
    level = Column(
        SQLEnum(CourseLevel, name="course_level"),
        default=CourseLevel.BEGINNER,
        nullable=False,
    )
    status = Column(
        SQLEnum(CourseStatus, name="course_status"),
        default=CourseStatus.DRAFT,
        nullable=False,
        index=True,
    )
    instructor_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Derived counters, maintained by the services
    rating = Column(Float, default=0.0, nullable=False)
    total_rating = Column(Integer, default=0, nullable=False)
    total_student = Column(Integer, default=0, nullable=False)
    total_lesson = Column(Integer, default=0, nullable=False)

    # Relationships
    instructor = relationship("User", lazy="joined")

    @property
    def is_free(self) -> bool:
        return not self.price

    def __repr__(self):
        return f"<Course(id={self.id}, slug={self.slug})>"


class Lesson(Base, BaseMixin, SoftDeleteMixin):
    """
    A lesson inside a course, ordered by order_index
    """

    __tablename__ = "lessons"

    course_id = Column(
        Integer,
        ForeignKey("courses.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    content = Column(Text, nullable=True)
    video_url = Column(String(500), nullable=True)
    lesson_type = Column(
        SQLEnum(LessonType, name="lesson_type"),
        default=LessonType.VIDEO,
        nullable=False,
    )
    duration_minutes = Column(Integer, default=0, nullable=False)
    is_free = Column(Boolean, default=False, nullable=False)
    order_index = Column(Integer, default=0, nullable=False)

    def __repr__(self):
        return f"<Lesson(id={self.id}, title={self.title}, type={self.lesson_type})>"
