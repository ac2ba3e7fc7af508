# ------------------------------------------
# SQLAlchemy Lesson model definition
# Lessons are managed outside the assessment core; quizzes link to them
# and progress records are keyed by (user, lesson)
# ------------------------------------------

from sqlalchemy import Column, String, Integer, Text, DateTime
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
import uuid
from assessment.db.database import Base


class Lesson(Base):
    __tablename__ = "lessons"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()), index=True)
    lesson_code = Column(String, unique=True, nullable=False)
    title = Column(String, nullable=False)
    subject = Column(String, nullable=False)
    grade = Column(Integer, nullable=False)
    duration = Column(Integer, nullable=False, default=0)
    description = Column(Text, nullable=True)
    instructor = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    quizzes = relationship("Quiz", back_populates="lesson")
    progress_records = relationship("Progress", back_populates="lesson")
