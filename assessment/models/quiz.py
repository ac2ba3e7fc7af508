"""
Quiz Data Models
================

SQLAlchemy ORM models for quiz definitions.

Models:
- Quiz: Versioned assessment definition owned by an instructor
- Question: Ordered question owned by a quiz
- Option: Answer option owned by a choice-type question

Features:
- Multilingual text stored as JSON ({"en": ..., "hi": ..., "pa": ...})
- Stable UUID identifiers for questions and options, independent of order
- Derived total_points kept equal to the sum of question points
- Soft deletion via is_deleted / is_active flags
"""

from sqlalchemy import (
    Column, Integer, String, DateTime, Boolean,
    ForeignKey, Enum, JSON
)
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
import enum
import uuid
from assessment.db.database import Base


class QuizType(str, enum.Enum):
    """Quiz type enumeration."""
    practice = "practice"
    assessment = "assessment"
    certification = "certification"


class QuestionType(str, enum.Enum):
    """Question type enumeration."""
    multiple_choice = "multiple_choice"
    true_false = "true_false"
    fill_blank = "fill_blank"
    image_choice = "image_choice"


CHOICE_QUESTION_TYPES = (QuestionType.multiple_choice, QuestionType.true_false, QuestionType.image_choice)


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Quiz(Base):
    """
    Quiz definition.

    total_points is derived from the questions and must never be taken from
    caller input; see compute_total_points().
    """
    __tablename__ = "quizzes"

    id = Column(String, primary_key=True, default=_new_id, index=True)
    title = Column(JSON, nullable=False)
    description = Column(JSON, nullable=True)
    lesson_id = Column(String, ForeignKey("lessons.id"), nullable=True, index=True)
    subject = Column(String, nullable=False, index=True)
    class_level = Column("class", Integer, nullable=False, index=True)
    quiz_type = Column("type", Enum(QuizType), nullable=False, default=QuizType.practice)
    time_limit = Column(Integer, nullable=True)
    passing_score = Column(Integer, nullable=False, default=60)
    attempts_allowed = Column(Integer, nullable=False, default=-1)
    shuffle_questions = Column(Boolean, nullable=False, default=False)
    shuffle_options = Column(Boolean, nullable=False, default=True)
    show_correct_answers = Column(Boolean, nullable=False, default=True)
    show_score_immediately = Column(Boolean, nullable=False, default=True)
    total_points = Column(Integer, nullable=False, default=0)
    created_by = Column(String, nullable=False, index=True)
    is_published = Column(Boolean, nullable=False, default=False)
    published_at = Column(DateTime(timezone=True), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    is_deleted = Column(Boolean, nullable=False, default=False, index=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    lesson = relationship("Lesson", back_populates="quizzes")
    questions = relationship(
        "Question", back_populates="quiz", cascade="all, delete-orphan", order_by="Question.order_index"
    )

    def compute_total_points(self) -> int:
        return sum(question.points or 0 for question in self.questions)


class Question(Base):
    """Individual question within a quiz."""
    __tablename__ = "quiz_questions"

    id = Column(String, primary_key=True, default=_new_id, index=True)
    quiz_id = Column(String, ForeignKey("quizzes.id", ondelete="CASCADE"), nullable=False, index=True)
    question_type = Column("type", Enum(QuestionType), nullable=False)
    question = Column(JSON, nullable=False)
    image_key = Column(String, nullable=True)
    correct_answer = Column(JSON, nullable=True)
    explanation = Column(JSON, nullable=True)
    points = Column(Integer, nullable=False, default=1)
    order_index = Column(Integer, nullable=False, default=0)

    quiz = relationship("Quiz", back_populates="questions")
    options = relationship(
        "Option", back_populates="question", cascade="all, delete-orphan", order_by="Option.order_index"
    )


class Option(Base):
    """Answer option for choice-type questions."""
    __tablename__ = "quiz_options"

    id = Column(String, primary_key=True, default=_new_id, index=True)
    question_id = Column(String, ForeignKey("quiz_questions.id", ondelete="CASCADE"), nullable=False, index=True)
    text = Column(JSON, nullable=False)
    image_key = Column(String, nullable=True)
    is_correct = Column(Boolean, nullable=False, default=False)
    order_index = Column(Integer, nullable=False, default=0)

    question = relationship("Question", back_populates="options")
