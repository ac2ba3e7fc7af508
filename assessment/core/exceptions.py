"""
Assessment Errors
=================

Failure categories signalled by the assessment services. The HTTP layer maps
them onto status codes in ``main.py``:

- NotFoundError  -> 404
- ForbiddenError -> 403
- ConflictError  -> 409
"""


class AssessmentError(Exception):
    """Base class for errors raised by the assessment core."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(AssessmentError):
    status_code = 404


class QuizNotFoundError(NotFoundError):
    def __init__(self, quiz_id: str):
        super().__init__("Quiz not found")
        self.quiz_id = quiz_id


class LessonNotFoundError(NotFoundError):
    """The lesson a progress record would belong to does not exist."""

    def __init__(self, lesson_id: str):
        super().__init__("Lesson not found")
        self.lesson_id = lesson_id


class ForbiddenError(AssessmentError):
    status_code = 403


class ConflictError(AssessmentError):
    status_code = 409


class DuplicateLessonCodeError(ConflictError):
    def __init__(self, lesson_code: str):
        super().__init__(f"Lesson code '{lesson_code}' already exists")
        self.lesson_code = lesson_code


class LessonInUseError(ConflictError):
    """A lesson with recorded learner progress cannot be deleted."""

    def __init__(self, lesson_id: str):
        super().__init__("Lesson has recorded progress and cannot be deleted")
        self.lesson_id = lesson_id


class AttemptConflictError(ConflictError):
    """Raised when concurrent submissions keep invalidating the progress row."""

    def __init__(self, user_id: str, quiz_id: str, retries: int):
        super().__init__(
            f"Could not record attempt after {retries} retries due to concurrent submissions. Please retry."
        )
        self.user_id = user_id
        self.quiz_id = quiz_id
        self.retries = retries
