"""
Lesson Service
=====================================
Service layer for the lessons quizzes link to and progress is keyed by.

Lessons are addressed either by id or by their unique lesson code.
"""

import logging
import math
from typing import Optional
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from assessment.core.exceptions import LessonNotFoundError, DuplicateLessonCodeError, LessonInUseError
from assessment.models.lesson import Lesson
from assessment.models.progress import Progress
from assessment.models.quiz import Quiz
from assessment.schemas.lesson import LessonCreate, LessonUpdate, LessonListResponse, LessonResponse, PaginationMeta

logger = logging.getLogger(__name__)


def _ensure_code_available(db: Session, lesson_code: str, exclude_id: Optional[str] = None) -> None:
    query = db.query(Lesson.id).filter(Lesson.lesson_code == lesson_code)
    if exclude_id is not None:
        query = query.filter(Lesson.id != exclude_id)
    if query.first():
        raise DuplicateLessonCodeError(lesson_code)


def get_lesson(db: Session, lesson_ref: str) -> Lesson:
    """Fetch a lesson by id or lesson code."""
    lesson = db.query(Lesson).filter(or_(Lesson.id == lesson_ref, Lesson.lesson_code == lesson_ref)).first()
    if not lesson:
        logger.warning(f"Lesson {lesson_ref} not found")
        raise LessonNotFoundError(lesson_ref)
    return lesson


def ensure_lesson_exists(db: Session, lesson_id: str) -> None:
    """Quizzes and progress records link to lessons by id only."""
    if db.get(Lesson, lesson_id) is None:
        logger.warning(f"Lesson {lesson_id} not found")
        raise LessonNotFoundError(lesson_id)


def list_lessons(
    db: Session,
    page: int = 1,
    limit: int = 10,
    subject: Optional[str] = None,
    grade: Optional[int] = None,
    instructor: Optional[str] = None,
) -> LessonListResponse:
    query = db.query(Lesson)
    if subject:
        query = query.filter(Lesson.subject.ilike(f"{subject}%"))
    if grade is not None:
        query = query.filter(Lesson.grade == grade)
    if instructor:
        query = query.filter(Lesson.instructor.ilike(f"%{instructor}%"))

    total_results = query.count()
    lessons = (
        query.order_by(Lesson.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )

    return LessonListResponse(
        lessons=[LessonResponse.model_validate(lesson) for lesson in lessons],
        pagination=PaginationMeta(
            page=page,
            limit=limit,
            total_results=total_results,
            total_pages=math.ceil(total_results / limit) if limit else 0,
        ),
    )


def create_lesson(db: Session, data: LessonCreate) -> Lesson:
    _ensure_code_available(db, data.lesson_code)
    lesson = Lesson(**data.model_dump())
    db.add(lesson)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicateLessonCodeError(data.lesson_code)
    db.refresh(lesson)

    logger.info(f"Lesson created successfully: {lesson.id} ({lesson.lesson_code})")
    return lesson


def update_lesson(db: Session, lesson_ref: str, changes: LessonUpdate) -> Lesson:
    lesson = get_lesson(db, lesson_ref)
    data = changes.model_dump(exclude_unset=True)

    if data.get("lesson_code") and data["lesson_code"] != lesson.lesson_code:
        _ensure_code_available(db, data["lesson_code"], exclude_id=lesson.id)

    for field, value in data.items():
        if value is None and field not in ("description", "instructor"):
            continue
        setattr(lesson, field, value)

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicateLessonCodeError(data.get("lesson_code", lesson.lesson_code))
    db.refresh(lesson)

    logger.info(f"Lesson updated successfully: {lesson.id}")
    return lesson


def delete_lesson(db: Session, lesson_ref: str) -> None:
    """
    Delete a lesson. Quizzes linked to it are unlinked and become lessonless;
    a lesson that already has learner progress is kept.
    """
    lesson = get_lesson(db, lesson_ref)
    lesson_id = lesson.id

    if db.query(Progress.id).filter(Progress.lesson_id == lesson_id).first():
        logger.warning(f"Refusing to delete lesson {lesson_id}: progress records exist")
        raise LessonInUseError(lesson_id)

    unlinked = (
        db.query(Quiz)
        .filter(Quiz.lesson_id == lesson_id)
        .update({Quiz.lesson_id: None}, synchronize_session="fetch")
    )
    db.delete(lesson)
    db.commit()

    logger.info(f"Lesson deleted successfully: {lesson_id} ({unlinked} quizzes unlinked)")
