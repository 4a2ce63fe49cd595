from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from src.schemas.course import CourseSummary, LessonOutline, LessonResponse


# =============================
#   Enrollment
# =============================
class EnrollmentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    course_id: int
    created_date: datetime
    completed_at: Optional[datetime] = None


class MyCourseResponse(BaseModel):
    """A course on the learner's dashboard"""
    enrollment: EnrollmentResponse
    course: CourseSummary
    progress_percent: int = Field(..., ge=0, le=100)


# =============================
#   Course Player
# =============================
class PlayerLesson(LessonOutline):
    completed: bool = False


class PlayerOutline(BaseModel):
    course: CourseSummary
    lessons: List[PlayerLesson]
    completed_count: int
    progress_percent: int = Field(..., ge=0, le=100)
    current_lesson_id: Optional[int] = None
    completed_at: Optional[datetime] = None


class PlayerLessonResponse(BaseModel):
    lesson: LessonResponse
    completed: bool
    previous_lesson_id: Optional[int] = None
    next_lesson_id: Optional[int] = None


class ProgressResponse(BaseModel):
    lesson_id: int
    completed: bool
    completed_count: int
    total_lessons: int
    progress_percent: int = Field(..., ge=0, le=100)
    course_completed: bool


# =============================
#   Reviews
# =============================
class CreateReviewRequest(BaseModel):
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = Field(None, max_length=5000)


class ReviewResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    course_id: int
    user_id: int
    reviewer_name: str
    rating: int
    comment: Optional[str] = None
    created_date: datetime
    updated_date: datetime
