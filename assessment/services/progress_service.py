"""
Progress Service
=====================================
Service layer for quiz submissions and the per-learner progress ledger.

Features:
- Submission flow: load quiz -> grade -> record attempt on the lesson's progress
- Lazy creation of one Progress record per (user, lesson)
- Sequential attempt numbers per (user, quiz), safe under concurrent submissions
- Monotonic best score tracking
- Offline sync metadata (client timestamp, sync status)
- Attempt history across lessons, newest first

Concurrency:
Progress rows carry a version counter (SQLAlchemy version_id_col) and attempt
numbers are unique per (progress, quiz). Counting, appending and bumping the
best score happen in one transaction; if another writer commits first the flush
fails with StaleDataError or IntegrityError, the transaction is rolled back and
the whole read-append cycle is retried.
"""

import logging
import math
from typing import List, Optional
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError
from datetime import datetime, timezone

from assessment.core.config import ATTEMPT_RECORD_MAX_RETRIES
from assessment.core.exceptions import AttemptConflictError
from assessment.models.lesson import Lesson
from assessment.models.progress import Progress, QuizAttempt, ProgressStatus, SyncStatus
from assessment.schemas.attempt import (
    GradedAttempt, QuizSubmission, SubmissionResult,
    AttemptWithLesson, LessonSummary
)
from assessment.services.evaluator import evaluate_attempt
from assessment.services.lesson_service import ensure_lesson_exists
from assessment.services.quiz_service import get_quiz

logger = logging.getLogger(__name__)


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Treat naive timestamps as UTC so client and server times can be compared."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _is_unique_violation(error: IntegrityError) -> bool:
    """Unique-key collisions are lost races; other constraint failures are real errors."""
    if getattr(error.orig, "pgcode", None) == "23505":
        return True
    message = str(error.orig).lower()
    return "unique" in message or "duplicate" in message


def _get_or_create_progress(db: Session, user_id: str, lesson_id: str) -> Progress:
    progress = db.query(Progress).filter(
        Progress.user_id == user_id,
        Progress.lesson_id == lesson_id
    ).first()

    if progress:
        return progress

    progress = Progress(
        user_id=user_id,
        lesson_id=lesson_id,
        status=ProgressStatus.not_started,
        best_quiz_score=0.0,
        sync_status=SyncStatus.synced,
    )
    db.add(progress)
    # A concurrent first submission for the same lesson fails here on the
    # (user_id, lesson_id) unique constraint and is retried by the caller.
    db.flush()
    logger.info(f"Created progress record {progress.id} for user {user_id}, lesson {lesson_id}")
    return progress


def _next_attempt_number(db: Session, progress: Progress, quiz_id: str) -> int:
    existing = db.query(func.count(QuizAttempt.id)).filter(
        QuizAttempt.progress_id == progress.id,
        QuizAttempt.quiz_id == quiz_id
    ).scalar()
    return (existing or 0) + 1


def _append_attempt(
    db: Session,
    progress: Progress,
    graded: GradedAttempt,
    submitted_at: datetime,
    started_at: Optional[datetime],
    duration: Optional[int],
    client_timestamp: Optional[datetime],
) -> QuizAttempt:
    attempt = QuizAttempt(
        quiz_id=graded.quiz_id,
        attempt_number=_next_attempt_number(db, progress, graded.quiz_id),
        score=graded.score,
        total_points=graded.total_points,
        percentage=graded.percentage,
        passed=graded.passed,
        answers=[result.model_dump(exclude={"explanation"}) for result in graded.results],
        started_at=started_at,
        submitted_at=submitted_at,
        duration=duration,
    )
    progress.quiz_attempts.append(attempt)

    if graded.percentage > (progress.best_quiz_score or 0.0):
        progress.best_quiz_score = graded.percentage
    if progress.status == ProgressStatus.not_started:
        progress.status = ProgressStatus.in_progress

    progress.sync_status = SyncStatus.synced
    progress.last_synced_at = datetime.now(timezone.utc)
    if client_timestamp is not None:
        progress.client_timestamp = client_timestamp

    return attempt


def record_attempt(
    db: Session,
    user_id: str,
    lesson_id: str,
    graded: GradedAttempt,
    *,
    submitted_at: Optional[datetime] = None,
    started_at: Optional[datetime] = None,
    duration: Optional[int] = None,
    client_timestamp: Optional[datetime] = None,
) -> QuizAttempt:
    """
    Append a graded attempt to the learner's progress for a lesson.

    Returns the persisted attempt with its attempt number. Raises
    LessonNotFoundError if the lesson does not exist and AttemptConflictError
    if concurrent writers keep winning after ATTEMPT_RECORD_MAX_RETRIES tries.
    """
    ensure_lesson_exists(db, lesson_id)

    submitted_at = submitted_at or datetime.now(timezone.utc)

    for retry in range(1, ATTEMPT_RECORD_MAX_RETRIES + 1):
        try:
            progress = _get_or_create_progress(db, user_id, lesson_id)
            attempt = _append_attempt(
                db, progress, graded, submitted_at, started_at, duration, client_timestamp
            )
            db.commit()
            logger.info(
                f"Recorded attempt #{attempt.attempt_number} for user {user_id}, "
                f"quiz {graded.quiz_id}, lesson {lesson_id}"
            )
            return attempt
        except (StaleDataError, IntegrityError) as e:
            db.rollback()
            if isinstance(e, IntegrityError) and not _is_unique_violation(e):
                logger.error(f"Failed to record attempt for user {user_id}, quiz {graded.quiz_id}: {e}")
                raise
            logger.warning(
                f"Concurrent update on progress for user {user_id}, lesson {lesson_id} "
                f"(try {retry}/{ATTEMPT_RECORD_MAX_RETRIES}): {type(e).__name__}"
            )
        except Exception as e:
            db.rollback()
            logger.error(f"Failed to record attempt for user {user_id}, quiz {graded.quiz_id}: {e}")
            raise

    raise AttemptConflictError(user_id, graded.quiz_id, ATTEMPT_RECORD_MAX_RETRIES)


def submit_quiz_attempt(db: Session, quiz_id: str, user_id: str, submission: QuizSubmission) -> SubmissionResult:
    """
    Grade a submission and, when the quiz belongs to a lesson, record it.

    Quizzes without a lesson are graded statelessly: the result carries no
    attempt number and nothing is written.
    """
    quiz = get_quiz(db, quiz_id)
    graded = evaluate_attempt(quiz, submission.answers)

    client_timestamp = _as_utc(submission.client_timestamp)
    started_at = _as_utc(submission.started_at)
    submitted_at = client_timestamp or datetime.now(timezone.utc)
    duration = None
    if started_at:
        # A device clock behind the start time must not yield a negative duration.
        duration = max(0, math.floor((submitted_at - started_at).total_seconds()))

    attempt_number = None
    if quiz.lesson_id:
        attempt = record_attempt(
            db,
            user_id,
            quiz.lesson_id,
            graded,
            submitted_at=submitted_at,
            started_at=started_at,
            duration=duration,
            client_timestamp=client_timestamp,
        )
        attempt_number = attempt.attempt_number
    else:
        logger.info(f"Quiz {quiz_id} has no lesson; attempt by user {user_id} graded without recording")

    synced = " (Synced from client)" if client_timestamp else ""
    logger.info(
        f"Quiz attempt submitted successfully: {quiz_id} by user: {user_id}, "
        f"score: {graded.percentage:.1f}%{synced}"
    )
    logger.info(f"quiz.attempt quiz_id={quiz_id} user_id={user_id} sync={'true' if client_timestamp else 'false'}")
    logger.info(f"quiz.score quiz_id={quiz_id} user_id={user_id} value={graded.percentage:.2f}")

    return SubmissionResult(
        **graded.model_dump(),
        user_id=user_id,
        attempt_number=attempt_number,
        submitted_at=submitted_at,
        duration=duration,
    )


def list_user_attempts(db: Session, user_id: str) -> List[AttemptWithLesson]:
    """All attempts by a user across lessons, newest first."""
    rows = (
        db.query(QuizAttempt, Progress, Lesson)
        .join(Progress, QuizAttempt.progress_id == Progress.id)
        .join(Lesson, Progress.lesson_id == Lesson.id)
        .filter(Progress.user_id == user_id)
        .order_by(QuizAttempt.submitted_at.desc(), QuizAttempt.id.desc())
        .all()
    )

    return [
        AttemptWithLesson(
            quiz_id=attempt.quiz_id,
            attempt_number=attempt.attempt_number,
            score=attempt.score,
            total_points=attempt.total_points,
            percentage=attempt.percentage,
            passed=attempt.passed,
            answers=attempt.answers,
            started_at=attempt.started_at,
            submitted_at=attempt.submitted_at,
            duration=attempt.duration,
            lesson=LessonSummary.model_validate(lesson),
            status=progress.status,
        )
        for attempt, progress, lesson in rows
    ]
