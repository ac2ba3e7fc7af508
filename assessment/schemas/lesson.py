from pydantic import Field
from typing import List, Optional
from datetime import datetime
from assessment.schemas.quiz import CamelModel


class LessonCreate(CamelModel):
    lesson_code: str = Field(..., min_length=1, description="Human-readable unique code, e.g. MATH-10-001")
    title: str = Field(..., min_length=1)
    subject: str = Field(..., min_length=1)
    grade: int = Field(..., ge=1, le=12)
    duration: int = Field(0, ge=0, description="Duration in minutes")
    description: Optional[str] = None
    instructor: Optional[str] = None


class LessonUpdate(CamelModel):
    lesson_code: Optional[str] = Field(None, min_length=1)
    title: Optional[str] = Field(None, min_length=1)
    subject: Optional[str] = Field(None, min_length=1)
    grade: Optional[int] = Field(None, ge=1, le=12)
    duration: Optional[int] = Field(None, ge=0)
    description: Optional[str] = None
    instructor: Optional[str] = None


class LessonResponse(CamelModel):
    id: str
    lesson_code: str
    title: str
    subject: str
    grade: int
    duration: int
    description: Optional[str] = None
    instructor: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PaginationMeta(CamelModel):
    page: int
    limit: int
    total_results: int
    total_pages: int


class LessonListResponse(CamelModel):
    lessons: List[LessonResponse]
    pagination: PaginationMeta
