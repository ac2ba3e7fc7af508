"""
Attempt Schemas
===============

Pydantic models for quiz submissions, graded results and the attempt history
returned to learners.
"""

from pydantic import Field
from typing import List, Optional
from datetime import datetime
from assessment.models.progress import ProgressStatus
from assessment.schemas.quiz import CamelModel, MultilingualText


class AnswerSubmission(CamelModel):
    question_id: str
    selected_option: Optional[str] = None
    answer: Optional[str] = None


class QuizSubmission(CamelModel):
    """Request model for submitting a quiz attempt."""
    answers: List[AnswerSubmission] = Field(..., min_length=1, description="At least one answer is required")
    started_at: Optional[datetime] = None
    client_timestamp: Optional[datetime] = Field(None, description="Device time of an offline submission")


class GradedAnswer(CamelModel):
    question_id: str
    selected_option: Optional[str] = None
    answer: Optional[str] = None
    is_correct: bool
    points: int
    explanation: Optional[MultilingualText] = None


class GradedAttempt(CamelModel):
    """Output of the evaluator. Nothing here is persisted yet."""
    quiz_id: str
    score: int
    total_points: int
    percentage: float
    passed: bool
    results: List[GradedAnswer]


class SubmissionResult(GradedAttempt):
    user_id: str
    attempt_number: Optional[int] = Field(None, description="Null when the quiz has no lesson and nothing was recorded")
    submitted_at: datetime
    duration: Optional[int] = None


class AttemptAnswerRecord(CamelModel):
    question_id: str
    selected_option: Optional[str] = None
    answer: Optional[str] = None
    is_correct: bool
    points: int


class AttemptResponse(CamelModel):
    quiz_id: str
    attempt_number: int
    score: int
    total_points: int
    percentage: float
    passed: bool
    answers: List[AttemptAnswerRecord]
    started_at: Optional[datetime] = None
    submitted_at: datetime
    duration: Optional[int] = None


class LessonSummary(CamelModel):
    id: str
    title: str
    subject: str
    grade: int


class AttemptWithLesson(AttemptResponse):
    lesson: LessonSummary
    status: ProgressStatus
