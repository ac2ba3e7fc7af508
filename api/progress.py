from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from assessment.db.database import get_db
from assessment.core.security import get_current_principal
from assessment.schemas.attempt import AttemptWithLesson
from assessment.schemas.user import Principal
from assessment.services.progress_service import list_user_attempts

router = APIRouter(prefix="/api/v1/progress", tags=["Progress"])

@router.get("/quizzes/me", response_model=List[AttemptWithLesson])
def get_my_quiz_attempts(
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal)
):
    return list_user_attempts(db, principal.user_id)
