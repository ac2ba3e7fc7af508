from pydantic import BaseModel
from enum import Enum


class UserRole(str, Enum):
    student = "student"
    teacher = "teacher"
    admin = "admin"


STAFF_ROLES = (UserRole.teacher, UserRole.admin)


class Principal(BaseModel):
    """Authenticated caller as seen by the assessment core."""
    user_id: str
    role: UserRole

    @property
    def is_staff(self) -> bool:
        return self.role in STAFF_ROLES
