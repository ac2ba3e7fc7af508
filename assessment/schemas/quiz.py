"""
Quiz Schemas
============

Pydantic models for quiz-related API requests and responses.

Two read projections are derived from the same stored quiz:
- QuizResponse: full record including the answer key (teachers/admins)
- StudentQuizResponse: redacted record without isCorrect, correctAnswer
  and explanation (students)
"""

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel
from typing import List, Optional
from datetime import datetime
from assessment.core.config import DEFAULT_PASSING_SCORE
from assessment.models.quiz import QuizType, QuestionType


class CamelModel(BaseModel):
    """Base model serialising snake_case fields under camelCase names."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class MultilingualText(BaseModel):
    """Text with a mandatory English value and optional Hindi/Punjabi translations."""
    en: str = Field(..., description="English text is required")
    hi: Optional[str] = None
    pa: Optional[str] = None

    class Config:
        extra = "forbid"


class OptionCreate(CamelModel):
    id: Optional[str] = Field(None, description="Existing option id to keep when updating")
    text: MultilingualText
    image_key: Optional[str] = None
    is_correct: bool


class QuestionCreate(CamelModel):
    id: Optional[str] = Field(None, description="Existing question id to keep when updating")
    question_type: QuestionType = Field(..., alias="type")
    question: MultilingualText
    image_key: Optional[str] = None
    options: List[OptionCreate] = []
    correct_answer: Optional[MultilingualText] = None
    explanation: Optional[MultilingualText] = None
    points: int = Field(1, ge=1)


class QuizCreate(CamelModel):
    """Request model for creating a quiz. totalPoints is derived and never accepted."""
    title: MultilingualText
    description: Optional[MultilingualText] = None
    lesson_id: Optional[str] = None
    subject: str
    class_level: int = Field(..., alias="class", ge=1, le=12)
    quiz_type: QuizType = Field(QuizType.practice, alias="type")
    time_limit: Optional[int] = Field(None, ge=1, description="Time limit in minutes")
    passing_score: int = Field(DEFAULT_PASSING_SCORE, ge=0, le=100)
    attempts_allowed: int = Field(-1, ge=-1, description="-1 means unlimited")
    shuffle_questions: bool = False
    shuffle_options: bool = True
    show_correct_answers: bool = True
    show_score_immediately: bool = True
    questions: List[QuestionCreate] = Field(..., min_length=1)
    is_published: bool = False


class QuizUpdate(CamelModel):
    """Partial update; only fields present in the request are applied."""
    title: Optional[MultilingualText] = None
    description: Optional[MultilingualText] = None
    lesson_id: Optional[str] = None
    subject: Optional[str] = None
    class_level: Optional[int] = Field(None, alias="class", ge=1, le=12)
    quiz_type: Optional[QuizType] = Field(None, alias="type")
    time_limit: Optional[int] = Field(None, ge=1)
    passing_score: Optional[int] = Field(None, ge=0, le=100)
    attempts_allowed: Optional[int] = Field(None, ge=-1)
    shuffle_questions: Optional[bool] = None
    shuffle_options: Optional[bool] = None
    show_correct_answers: Optional[bool] = None
    show_score_immediately: Optional[bool] = None
    questions: Optional[List[QuestionCreate]] = Field(None, min_length=1)
    is_published: Optional[bool] = None


class QuizFilter(BaseModel):
    subject: Optional[str] = None
    class_level: Optional[int] = None
    quiz_type: Optional[QuizType] = None
    lesson_id: Optional[str] = None
    is_published: Optional[bool] = None
    created_by: Optional[str] = None


class OptionResponse(CamelModel):
    id: str
    text: MultilingualText
    image_key: Optional[str] = None
    is_correct: bool


class QuestionResponse(CamelModel):
    id: str
    question_type: QuestionType = Field(..., alias="type")
    question: MultilingualText
    image_key: Optional[str] = None
    options: List[OptionResponse] = []
    correct_answer: Optional[MultilingualText] = None
    explanation: Optional[MultilingualText] = None
    points: int
    order_index: int


class StudentOptionResponse(CamelModel):
    class Config:
        extra = "forbid"

    id: str
    text: MultilingualText
    image_key: Optional[str] = None


class StudentQuestionResponse(CamelModel):
    class Config:
        extra = "forbid"

    id: str
    question_type: QuestionType = Field(..., alias="type")
    question: MultilingualText
    image_key: Optional[str] = None
    options: List[StudentOptionResponse] = []
    points: int
    order_index: int


class QuizSummaryFields(CamelModel):
    id: str
    title: MultilingualText
    description: Optional[MultilingualText] = None
    lesson_id: Optional[str] = None
    subject: str
    class_level: int = Field(..., alias="class")
    quiz_type: QuizType = Field(..., alias="type")
    time_limit: Optional[int] = None
    passing_score: int
    attempts_allowed: int
    shuffle_questions: bool
    shuffle_options: bool
    show_correct_answers: bool
    show_score_immediately: bool
    total_points: int
    created_by: str
    is_published: bool
    published_at: Optional[datetime] = None
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class QuizResponse(QuizSummaryFields):
    """Full quiz record for teachers and admins."""
    is_deleted: bool
    questions: List[QuestionResponse]


class StudentQuizResponse(QuizSummaryFields):
    """Redacted quiz record for students."""
    questions: List[StudentQuestionResponse]
