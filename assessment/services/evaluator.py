"""
Attempt Evaluator
=====================================
Pure grading of a learner's answers against a quiz's answer key.

Rules:
- multiple_choice / true_false / image_choice: correct iff the selected option
  belongs to the question and is marked correct
- fill_blank: trimmed, case-insensitive comparison against the English
  reference answer; no partial credit
- Unanswered questions, unknown option ids and blank text score 0 instead of
  failing the submission

Nothing here touches the database.
"""

import logging
from typing import Dict, Iterable, Optional

from assessment.models.quiz import Quiz, Question, QuestionType, CHOICE_QUESTION_TYPES
from assessment.schemas.attempt import AnswerSubmission, GradedAnswer, GradedAttempt
from assessment.schemas.quiz import MultilingualText

logger = logging.getLogger(__name__)


def _normalize(text: Optional[str]) -> str:
    return (text or "").strip().lower()


def _index_answers(answers: Iterable[AnswerSubmission]) -> Dict[str, AnswerSubmission]:
    """Map question id to the first answer given for it."""
    indexed: Dict[str, AnswerSubmission] = {}
    for answer in answers:
        indexed.setdefault(str(answer.question_id), answer)
    return indexed


def is_choice_correct(question: Question, selected_option: Optional[str]) -> bool:
    if not selected_option:
        return False
    for option in question.options:
        if str(option.id) == str(selected_option):
            return bool(option.is_correct)
    return False


def is_fill_blank_correct(question: Question, answer: Optional[str]) -> bool:
    reference = (question.correct_answer or {}).get("en")
    if not reference or answer is None:
        return False
    return _normalize(answer) == _normalize(reference)


def grade_question(question: Question, answer: Optional[AnswerSubmission]) -> bool:
    if answer is None:
        return False
    if question.question_type in CHOICE_QUESTION_TYPES:
        return is_choice_correct(question, answer.selected_option)
    if question.question_type == QuestionType.fill_blank:
        return is_fill_blank_correct(question, answer.answer)
    logger.warning(f"Unsupported question type '{question.question_type}' on question {question.id}")
    return False


def calculate_percentage(score: int, total_points: int) -> float:
    return (score / total_points) * 100 if total_points > 0 else 0.0


def evaluate_attempt(quiz: Quiz, answers: Iterable[AnswerSubmission]) -> GradedAttempt:
    """Grade answers against the quiz in question order."""
    by_question = _index_answers(answers)

    score = 0
    results = []
    for question in quiz.questions:
        answer = by_question.get(str(question.id))
        is_correct = grade_question(question, answer)
        points_earned = (question.points or 0) if is_correct else 0
        score += points_earned

        explanation = None
        if quiz.show_correct_answers and question.explanation:
            explanation = MultilingualText(**question.explanation)

        results.append(GradedAnswer(
            question_id=str(question.id),
            selected_option=answer.selected_option if answer else None,
            answer=answer.answer if answer else None,
            is_correct=is_correct,
            points=points_earned,
            explanation=explanation,
        ))

    total_points = quiz.total_points or quiz.compute_total_points()
    percentage = calculate_percentage(score, total_points)
    passed = percentage >= quiz.passing_score

    return GradedAttempt(
        quiz_id=str(quiz.id),
        score=score,
        total_points=total_points,
        percentage=percentage,
        passed=passed,
        results=results,
    )
