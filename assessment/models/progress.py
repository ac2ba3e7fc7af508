"""
Progress Data Models
=====================================
SQLAlchemy ORM models for the per-learner attempt ledger.

Models:
- Progress: One record per (user, lesson), created on the first attempt
- QuizAttempt: Append-only graded attempt owned by a Progress record

Features:
- Unique (user_id, lesson_id) progress rows
- Optimistic concurrency through a version counter on Progress
- Unique (progress_id, quiz_id, attempt_number) so numbers are never reused
- Offline sync metadata (sync_status, last_synced_at, client_timestamp)
"""

from sqlalchemy import (
    Column, Integer, String, Float, Boolean, DateTime,
    ForeignKey, Enum, JSON, UniqueConstraint
)
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
import enum
import uuid
from assessment.db.database import Base


class ProgressStatus(str, enum.Enum):
    not_started = "not_started"
    in_progress = "in_progress"
    completed = "completed"


class SyncStatus(str, enum.Enum):
    synced = "synced"
    pending = "pending"
    conflict = "conflict"


class Progress(Base):
    __tablename__ = "progress"
    __table_args__ = (
        UniqueConstraint("user_id", "lesson_id", name="uq_progress_user_lesson"),
    )

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()), index=True)
    user_id = Column(String, nullable=False, index=True)
    lesson_id = Column(String, ForeignKey("lessons.id"), nullable=False, index=True)
    status = Column(Enum(ProgressStatus), nullable=False, default=ProgressStatus.not_started)
    best_quiz_score = Column(Float, nullable=False, default=0.0)
    sync_status = Column(Enum(SyncStatus), nullable=False, default=SyncStatus.synced)
    last_synced_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    client_timestamp = Column(DateTime(timezone=True), nullable=True)
    version = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    lesson = relationship("Lesson", back_populates="progress_records")
    quiz_attempts = relationship(
        "QuizAttempt",
        back_populates="progress",
        cascade="all, delete-orphan",
        order_by="QuizAttempt.submitted_at",
    )

    __mapper_args__ = {"version_id_col": version}


class QuizAttempt(Base):
    """Graded attempt. Rows are inserted once and never updated."""
    __tablename__ = "quiz_attempts"
    __table_args__ = (
        UniqueConstraint("progress_id", "quiz_id", "attempt_number", name="uq_attempt_number"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    progress_id = Column(String, ForeignKey("progress.id", ondelete="CASCADE"), nullable=False, index=True)
    quiz_id = Column(String, ForeignKey("quizzes.id"), nullable=False, index=True)
    attempt_number = Column(Integer, nullable=False)
    score = Column(Integer, nullable=False)
    total_points = Column(Integer, nullable=False)
    percentage = Column(Float, nullable=False)
    passed = Column(Boolean, nullable=False)
    answers = Column(JSON, nullable=False, default=list)
    started_at = Column(DateTime(timezone=True), nullable=True)
    submitted_at = Column(DateTime(timezone=True), nullable=False)
    duration = Column(Integer, nullable=True)

    progress = relationship("Progress", back_populates="quiz_attempts")
