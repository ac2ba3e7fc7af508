"""
Lesson API Routes
================

Endpoints:
- GET    /api/v1/lessons              - List lessons (paginated, filterable)
- GET    /api/v1/lessons/{lesson_ref} - Get a lesson by id or lesson code
- POST   /api/v1/lessons              - Create lesson (teacher/admin)
- PATCH  /api/v1/lessons/{lesson_ref} - Update lesson (teacher/admin)
- DELETE /api/v1/lessons/{lesson_ref} - Delete lesson (teacher/admin)
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional
import logging

from assessment.db.database import get_db
from assessment.core.security import get_current_principal, require_staff
from assessment.schemas.lesson import LessonCreate, LessonUpdate, LessonResponse, LessonListResponse
from assessment.schemas.user import Principal
from assessment.services import lesson_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/lessons", tags=["Lesson"])


@router.get("", response_model=LessonListResponse)
def list_lessons_endpoint(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    subject: Optional[str] = Query(None, description="Subject prefix, case-insensitive"),
    grade: Optional[int] = Query(None, ge=1, le=12),
    instructor: Optional[str] = Query(None, description="Partial instructor name"),
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal)
):
    return lesson_service.list_lessons(db, page, limit, subject, grade, instructor)


@router.get("/{lesson_ref}", response_model=LessonResponse)
def get_lesson_endpoint(
    lesson_ref: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal)
):
    return lesson_service.get_lesson(db, lesson_ref)


@router.post("", response_model=LessonResponse, status_code=status.HTTP_201_CREATED)
def create_lesson_endpoint(
    data: LessonCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_staff)
):
    logger.info(f"User {principal.user_id} creating lesson {data.lesson_code}")
    return lesson_service.create_lesson(db, data)


@router.patch("/{lesson_ref}", response_model=LessonResponse)
def update_lesson_endpoint(
    lesson_ref: str,
    changes: LessonUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_staff)
):
    logger.info(f"User {principal.user_id} updating lesson {lesson_ref}")
    return lesson_service.update_lesson(db, lesson_ref, changes)


@router.delete("/{lesson_ref}")
def delete_lesson_endpoint(
    lesson_ref: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_staff)
):
    logger.info(f"User {principal.user_id} deleting lesson {lesson_ref}")
    lesson_service.delete_lesson(db, lesson_ref)
    return {"message": "Lesson deleted successfully"}
