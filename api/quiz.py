"""
Quiz API Routes
================

FastAPI endpoints for quiz definitions, submissions and analytics.

Endpoints:
- GET    /api/v1/quizzes                  - List quizzes (role-projected)
- GET    /api/v1/quizzes/{quiz_id}        - Get one quiz (role-projected)
- POST   /api/v1/quizzes                  - Create quiz (teacher/admin)
- PATCH  /api/v1/quizzes/{quiz_id}        - Update quiz (teacher/admin)
- DELETE /api/v1/quizzes/{quiz_id}        - Soft delete quiz (teacher/admin)
- POST   /api/v1/quizzes/{quiz_id}/attempt   - Submit an attempt
- GET    /api/v1/quizzes/{quiz_id}/analytics - Quiz analytics (teacher/admin)

Domain errors (not found, forbidden, conflict) propagate to the exception
handlers registered in main.py.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional, Union
import logging

from assessment.db.database import get_db
from assessment.core.security import get_current_principal, require_staff
from assessment.models.quiz import QuizType
from assessment.schemas.analytics import QuizAnalytics
from assessment.schemas.attempt import QuizSubmission, SubmissionResult
from assessment.schemas.quiz import (
    QuizCreate, QuizUpdate, QuizFilter, QuizResponse, StudentQuizResponse
)
from assessment.schemas.user import Principal
from assessment.services import quiz_service
from assessment.services.analytics_service import get_quiz_analytics
from assessment.services.progress_service import submit_quiz_attempt

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/quizzes", tags=["Quiz"])


@router.get("", response_model=List[Union[QuizResponse, StudentQuizResponse]])
def list_quizzes_endpoint(
    subject: Optional[str] = Query(None, description="Filter by subject"),
    class_level: Optional[int] = Query(None, alias="class", ge=1, le=12, description="Filter by class"),
    quiz_type: Optional[QuizType] = Query(None, alias="type", description="Filter by quiz type"),
    lesson_id: Optional[str] = Query(None, alias="lessonId"),
    is_published: Optional[bool] = Query(None, alias="isPublished"),
    created_by: Optional[str] = Query(None, alias="createdBy"),
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal)
):
    filters = QuizFilter(
        subject=subject,
        class_level=class_level,
        quiz_type=quiz_type,
        lesson_id=lesson_id,
        is_published=is_published,
        created_by=created_by,
    )
    return quiz_service.list_quizzes(db, filters, principal)


@router.get("/{quiz_id}", response_model=Union[QuizResponse, StudentQuizResponse])
def get_quiz_endpoint(
    quiz_id: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal)
):
    """
    Get a quiz.

    Students receive the redacted view: no isCorrect on options and no
    correctAnswer/explanation on questions.
    """
    return quiz_service.get_quiz_view(db, quiz_id, principal)


@router.post("", response_model=QuizResponse, status_code=status.HTTP_201_CREATED)
def create_quiz_endpoint(
    definition: QuizCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_staff)
):
    quiz = quiz_service.create_quiz(db, definition, principal.user_id)
    return QuizResponse.model_validate(quiz)


@router.patch("/{quiz_id}", response_model=QuizResponse)
def update_quiz_endpoint(
    quiz_id: str,
    changes: QuizUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_staff)
):
    logger.info(f"User {principal.user_id} updating quiz {quiz_id}")
    quiz = quiz_service.update_quiz(db, quiz_id, changes)
    return QuizResponse.model_validate(quiz)


@router.delete("/{quiz_id}")
def delete_quiz_endpoint(
    quiz_id: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_staff)
):
    logger.info(f"User {principal.user_id} deleting quiz {quiz_id}")
    quiz_service.soft_delete_quiz(db, quiz_id)
    return {"message": "Quiz deleted successfully"}


@router.post("/{quiz_id}/attempt", response_model=SubmissionResult, status_code=status.HTTP_201_CREATED)
def submit_quiz_attempt_endpoint(
    quiz_id: str,
    submission: QuizSubmission,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal)
):
    """
    Submit answers for a quiz and get the graded result.

    Unanswered questions count as incorrect. When the quiz belongs to a lesson
    the attempt is appended to the caller's progress for that lesson.
    """
    return submit_quiz_attempt(db, quiz_id, principal.user_id, submission)


@router.get("/{quiz_id}/analytics", response_model=QuizAnalytics)
def get_quiz_analytics_endpoint(
    quiz_id: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal)
):
    return get_quiz_analytics(db, quiz_id, principal)
