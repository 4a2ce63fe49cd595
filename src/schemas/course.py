from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from src.model.enums import CourseLevel, CourseStatus, LessonType


# =============================
#   Request Schemas
# =============================
class CreateCourseRequest(BaseModel):
    title: str = Field(..., min_length=3, max_length=255)
    description: Optional[str] = None
    thumbnail_url: Optional[str] = Field(None, max_length=500)
    price: int = Field(default=0, ge=0, description="Price in minor currency units; 0 = free")
    currency: str = Field(default="usd", min_length=3, max_length=3)
    level: CourseLevel = CourseLevel.BEGINNER


class UpdateCourseRequest(BaseModel):
    title: Optional[str] = Field(None, min_length=3, max_length=255)
    description: Optional[str] = None
    thumbnail_url: Optional[str] = Field(None, max_length=500)
    price: Optional[int] = Field(None, ge=0)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    level: Optional[CourseLevel] = None


class CreateLessonRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    content: Optional[str] = None
    video_url: Optional[str] = Field(None, max_length=500)
    lesson_type: LessonType = LessonType.VIDEO
    duration_minutes: int = Field(default=0, ge=0)
    is_free: bool = False
    order_index: Optional[int] = Field(None, ge=0, description="Defaults to the end of the course")


class UpdateLessonRequest(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    content: Optional[str] = None
    video_url: Optional[str] = Field(None, max_length=500)
    lesson_type: Optional[LessonType] = None
    duration_minutes: Optional[int] = Field(None, ge=0)
    is_free: Optional[bool] = None
    order_index: Optional[int] = Field(None, ge=0)


# =============================
#   Response Schemas
# =============================
class InstructorSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    full_name: str


class CourseSummary(BaseModel):
    """Catalog card"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    slug: str
    description: Optional[str] = None
    thumbnail_url: Optional[str] = None
    price: int
    currency: str
    level: CourseLevel
    status: CourseStatus
    rating: float
    total_rating: int
    total_student: int
    total_lesson: int
    instructor: Optional[InstructorSummary] = None
    created_date: datetime


class LessonOutline(BaseModel):
    """Lesson entry in a course outline; never carries content"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    lesson_type: LessonType
    duration_minutes: int
    is_free: bool
    order_index: int


class CourseDetail(CourseSummary):
    lessons: List[LessonOutline] = []


class LessonResponse(LessonOutline):
    description: Optional[str] = None
    content: Optional[str] = None
    video_url: Optional[str] = None
    course_id: int
