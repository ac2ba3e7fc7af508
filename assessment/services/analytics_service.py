"""
Analytics Service
=====================================
Read-side aggregation of quiz attempts for instructors.

The scan is a plain read over the ledger: attempts appended while it runs may
or may not be included, and writers are never blocked.
"""

import logging
from collections import defaultdict
from typing import Dict
from sqlalchemy.orm import Session

from assessment.core.exceptions import ForbiddenError
from assessment.models.progress import Progress, QuizAttempt
from assessment.schemas.analytics import QuizAnalytics, QuestionStat
from assessment.schemas.user import Principal
from assessment.services.quiz_service import get_quiz

logger = logging.getLogger(__name__)


def get_quiz_analytics(db: Session, quiz_id: str, principal: Principal) -> QuizAnalytics:
    """
    Summarise every recorded attempt for a quiz.

    Raises ForbiddenError for callers without staff capability and
    QuizNotFoundError for missing or deleted quizzes. A quiz nobody has
    attempted yields zeroed figures with one stat row per question.
    """
    if not principal.is_staff:
        logger.warning(f"User {principal.user_id} with role '{principal.role.value}' requested analytics for quiz {quiz_id}")
        raise ForbiddenError("Only teachers and admins can view quiz analytics")

    quiz = get_quiz(db, quiz_id)

    rows = (
        db.query(QuizAttempt, Progress.user_id)
        .join(Progress, QuizAttempt.progress_id == Progress.id)
        .filter(QuizAttempt.quiz_id == quiz.id)
        .all()
    )

    if not rows:
        return QuizAnalytics(
            quiz_id=quiz.id,
            question_stats=[QuestionStat(question_id=question.id) for question in quiz.questions],
        )

    total_attempts = len(rows)
    unique_students = len({user_id for _, user_id in rows})
    sum_scores = sum(attempt.percentage for attempt, _ in rows)
    pass_count = sum(1 for attempt, _ in rows if attempt.passed)

    attempt_counts: Dict[str, int] = defaultdict(int)
    correct_counts: Dict[str, int] = defaultdict(int)
    for attempt, _ in rows:
        for answer in attempt.answers or []:
            question_id = str(answer.get("question_id"))
            attempt_counts[question_id] += 1
            if answer.get("is_correct"):
                correct_counts[question_id] += 1

    question_stats = []
    for question in quiz.questions:
        attempt_count = attempt_counts.get(question.id, 0)
        correct_count = correct_counts.get(question.id, 0)
        question_stats.append(QuestionStat(
            question_id=question.id,
            correct_count=correct_count,
            attempt_count=attempt_count,
            correct_percentage=(correct_count / attempt_count) * 100 if attempt_count > 0 else 0.0,
        ))

    logger.info(f"Computed analytics for quiz {quiz_id}: {total_attempts} attempts by {unique_students} students")

    return QuizAnalytics(
        quiz_id=quiz.id,
        total_attempts=total_attempts,
        unique_students=unique_students,
        average_score=sum_scores / total_attempts,
        pass_rate=(pass_count / total_attempts) * 100,
        question_stats=question_stats,
    )
