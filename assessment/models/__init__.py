from .lesson import Lesson
from .quiz import Quiz, Question, Option, QuizType, QuestionType, CHOICE_QUESTION_TYPES
from .progress import Progress, QuizAttempt, ProgressStatus, SyncStatus

__all__ = [
    "Lesson",
    "Quiz", "Question", "Option", "QuizType", "QuestionType", "CHOICE_QUESTION_TYPES",
    "Progress", "QuizAttempt", "ProgressStatus", "SyncStatus",
]
