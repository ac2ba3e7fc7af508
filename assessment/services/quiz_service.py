"""
Quiz Service
=====================================
Service layer for the quiz definition store.

Features:
- Quiz creation with server-side total points
- Partial updates that keep question/option ids stable
- Soft deletion (is_deleted / is_active)
- Role-based read projections (full vs. redacted student view)
- Filtered listing that always excludes soft-deleted quizzes

All functions raise QuizNotFoundError for missing or soft-deleted quizzes;
the HTTP layer maps it to 404.
"""

import logging
from typing import Dict, List, Optional, Union, Any
from sqlalchemy.orm import Session, selectinload
from datetime import datetime, timezone

from assessment.core.exceptions import QuizNotFoundError
from assessment.models.quiz import Quiz, Question, Option
from assessment.schemas.quiz import (
    QuizCreate, QuizUpdate, QuizFilter, QuestionCreate, OptionCreate,
    QuizResponse, StudentQuizResponse
)
from assessment.schemas.user import Principal
from assessment.services.lesson_service import ensure_lesson_exists

logger = logging.getLogger(__name__)

QuizView = Union[QuizResponse, StudentQuizResponse]

# Fields a partial update may explicitly clear.
NULLABLE_QUIZ_FIELDS = {"lesson_id", "time_limit"}


def _text(value) -> Optional[Dict[str, str]]:
    """Store multilingual text as a plain JSON object without empty translations."""
    if value is None:
        return None
    return value.model_dump(exclude_none=True)


def _build_option(data: OptionCreate, order_index: int, existing: Optional[Option] = None) -> Option:
    option = existing or Option()
    option.text = _text(data.text)
    option.image_key = data.image_key
    option.is_correct = data.is_correct
    option.order_index = order_index
    return option


def _build_question(data: QuestionCreate, order_index: int, existing: Optional[Question] = None) -> Question:
    question = existing or Question()
    question.question_type = data.question_type
    question.question = _text(data.question)
    question.image_key = data.image_key
    question.correct_answer = _text(data.correct_answer)
    question.explanation = _text(data.explanation)
    question.points = data.points
    question.order_index = order_index

    current_options = {option.id: option for option in (existing.options if existing else [])}
    question.options = [
        _build_option(option_data, i, current_options.get(option_data.id) if option_data.id else None)
        for i, option_data in enumerate(data.options)
    ]
    return question


def _replace_questions(quiz: Quiz, questions: List[QuestionCreate]) -> None:
    """
    Replace the quiz's question list.

    Questions and options that reference an existing id are updated in place
    so answers recorded against those ids stay resolvable. Anything not
    referenced is removed (delete-orphan cascade).
    """
    current = {question.id: question for question in quiz.questions}
    quiz.questions = [
        _build_question(question_data, i, current.get(question_data.id) if question_data.id else None)
        for i, question_data in enumerate(questions)
    ]
    quiz.total_points = quiz.compute_total_points()


def create_quiz(db: Session, definition: QuizCreate, owner_id: str) -> Quiz:
    """Create a quiz owned by owner_id. total_points is always derived here."""
    if definition.lesson_id is not None:
        ensure_lesson_exists(db, definition.lesson_id)

    try:
        data = definition.model_dump(exclude={"questions", "title", "description"})
        quiz = Quiz(
            **data,
            title=_text(definition.title),
            description=_text(definition.description),
            created_by=owner_id,
        )
        _replace_questions(quiz, definition.questions)
        if quiz.is_published:
            quiz.published_at = datetime.now(timezone.utc)

        db.add(quiz)
        db.commit()
        db.refresh(quiz)

        logger.info(f"Quiz created successfully: {quiz.id} by user: {owner_id} ({quiz.total_points} points)")
        return quiz
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to create quiz: {e}")
        raise


def get_quiz(db: Session, quiz_id: str) -> Quiz:
    """Fetch a live (not soft-deleted) quiz with its questions and options."""
    quiz = (
        db.query(Quiz)
        .options(selectinload(Quiz.questions).selectinload(Question.options))
        .filter(Quiz.id == quiz_id, Quiz.is_deleted.is_(False))
        .first()
    )
    if not quiz:
        logger.warning(f"Quiz {quiz_id} not found or deleted")
        raise QuizNotFoundError(quiz_id)
    return quiz


def project_quiz(quiz: Quiz, principal: Principal) -> QuizView:
    """Read-time projection: staff see the answer key, students do not."""
    if principal.is_staff:
        return QuizResponse.model_validate(quiz)
    return StudentQuizResponse.model_validate(quiz)


def get_quiz_view(db: Session, quiz_id: str, principal: Principal) -> QuizView:
    return project_quiz(get_quiz(db, quiz_id), principal)


def update_quiz(db: Session, quiz_id: str, changes: QuizUpdate) -> Quiz:
    quiz = get_quiz(db, quiz_id)
    data: Dict[str, Any] = changes.model_dump(exclude_unset=True, exclude={"questions", "title", "description"})
    if data.get("lesson_id") is not None:
        ensure_lesson_exists(db, data["lesson_id"])

    was_published = quiz.is_published
    for field, value in data.items():
        if value is None and field not in NULLABLE_QUIZ_FIELDS:
            continue
        setattr(quiz, field, value)

    fields_set = changes.model_fields_set
    if "title" in fields_set and changes.title is not None:
        quiz.title = _text(changes.title)
    if "description" in fields_set:
        quiz.description = _text(changes.description)
    if "questions" in fields_set and changes.questions is not None:
        _replace_questions(quiz, changes.questions)

    if quiz.is_published and not was_published and quiz.published_at is None:
        quiz.published_at = datetime.now(timezone.utc)

    try:
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to update quiz {quiz_id}: {e}")
        raise
    db.refresh(quiz)

    logger.info(f"Quiz updated successfully: {quiz_id}")
    return quiz


def soft_delete_quiz(db: Session, quiz_id: str) -> Quiz:
    """Mark a quiz deleted. The record stays; it just stops being served or attempted."""
    quiz = get_quiz(db, quiz_id)
    quiz.is_deleted = True
    quiz.is_active = False
    db.commit()
    db.refresh(quiz)

    logger.info(f"Quiz deleted successfully: {quiz_id}")
    return quiz


def list_quizzes(db: Session, filters: QuizFilter, principal: Principal) -> List[QuizView]:
    query = (
        db.query(Quiz)
        .options(selectinload(Quiz.questions).selectinload(Question.options))
        .filter(Quiz.is_deleted.is_(False))
    )

    if filters.subject is not None:
        query = query.filter(Quiz.subject == filters.subject)
    if filters.class_level is not None:
        query = query.filter(Quiz.class_level == filters.class_level)
    if filters.quiz_type is not None:
        query = query.filter(Quiz.quiz_type == filters.quiz_type)
    if filters.lesson_id is not None:
        query = query.filter(Quiz.lesson_id == filters.lesson_id)
    if filters.is_published is not None:
        query = query.filter(Quiz.is_published == filters.is_published)
    if filters.created_by is not None:
        query = query.filter(Quiz.created_by == filters.created_by)

    quizzes = query.order_by(Quiz.created_at.desc()).all()
    logger.debug(f"Listed {len(quizzes)} quizzes for user {principal.user_id}")
    return [project_quiz(quiz, principal) for quiz in quizzes]
