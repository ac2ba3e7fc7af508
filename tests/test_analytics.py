import pytest

from assessment.core.exceptions import ForbiddenError, QuizNotFoundError
from assessment.schemas.attempt import QuizSubmission
from assessment.schemas.user import Principal, UserRole
from assessment.services.analytics_service import get_quiz_analytics
from assessment.services.progress_service import submit_quiz_attempt
from assessment.services.quiz_service import soft_delete_quiz

from factories import correct_option_id, wrong_option_id


def submit(db, quiz, user_id, correct):
    question = quiz.questions[0]
    option_id = correct_option_id(question) if correct else wrong_option_id(question)
    submission = QuizSubmission(answers=[{"questionId": question.id, "selectedOption": option_id}])
    return submit_quiz_attempt(db, quiz.id, user_id, submission)


def test_analytics_without_attempts_is_zeroed(db, quiz, teacher):
    analytics = get_quiz_analytics(db, quiz.id, teacher)

    assert analytics.quiz_id == quiz.id
    assert analytics.total_attempts == 0
    assert analytics.unique_students == 0
    assert analytics.average_score == 0
    assert analytics.pass_rate == 0
    assert [stat.question_id for stat in analytics.question_stats] == [quiz.questions[0].id]
    assert analytics.question_stats[0].attempt_count == 0
    assert analytics.question_stats[0].correct_percentage == 0


def test_analytics_aggregates_attempts(db, quiz, teacher):
    submit(db, quiz, "student-1", correct=True)
    submit(db, quiz, "student-1", correct=False)
    submit(db, quiz, "student-2", correct=True)
    submit(db, quiz, "student-3", correct=False)

    analytics = get_quiz_analytics(db, quiz.id, teacher)

    assert analytics.total_attempts == 4
    assert analytics.unique_students == 3
    assert analytics.average_score == pytest.approx(50.0)
    assert analytics.pass_rate == pytest.approx(50.0)
    stat = analytics.question_stats[0]
    assert stat.question_id == quiz.questions[0].id
    assert stat.attempt_count == 4
    assert stat.correct_count == 2
    assert stat.correct_percentage == pytest.approx(50.0)


def test_analytics_available_to_admins(db, quiz):
    admin = Principal(user_id="admin-1", role=UserRole.admin)

    assert get_quiz_analytics(db, quiz.id, admin).total_attempts == 0


def test_analytics_forbidden_for_students(db, quiz, student):
    with pytest.raises(ForbiddenError):
        get_quiz_analytics(db, quiz.id, student)


def test_analytics_for_missing_or_deleted_quiz(db, quiz, teacher):
    with pytest.raises(QuizNotFoundError):
        get_quiz_analytics(db, "missing-quiz", teacher)

    soft_delete_quiz(db, quiz.id)
    with pytest.raises(QuizNotFoundError):
        get_quiz_analytics(db, quiz.id, teacher)
