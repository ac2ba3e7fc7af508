import os

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from assessment.db.database import Base, get_db
from assessment.models import Lesson
from assessment.schemas.quiz import QuizCreate
from assessment.schemas.user import Principal, UserRole
from assessment.services.quiz_service import create_quiz
from main import app

from factories import make_token, quiz_payload

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def teacher():
    return Principal(user_id="teacher-1", role=UserRole.teacher)


@pytest.fixture
def student():
    return Principal(user_id="student-1", role=UserRole.student)


@pytest.fixture
def teacher_headers(teacher):
    return {"Authorization": f"Bearer {make_token(teacher.user_id, teacher.role.value)}"}


@pytest.fixture
def student_headers(student):
    return {"Authorization": f"Bearer {make_token(student.user_id, student.role.value)}"}


@pytest.fixture
def lesson(db):
    lesson = Lesson(
        lesson_code="TEST-LESSON-001",
        title="Test Lesson",
        subject="Math",
        grade=10,
        duration=30,
        description="Test Description",
        instructor="Test Instructor",
    )
    db.add(lesson)
    db.commit()
    db.refresh(lesson)
    return lesson


@pytest.fixture
def make_quiz(db, teacher):
    def factory(**overrides):
        return create_quiz(db, QuizCreate(**quiz_payload(**overrides)), teacher.user_id)
    return factory


@pytest.fixture
def quiz(make_quiz, lesson):
    return make_quiz(lessonId=lesson.id)
