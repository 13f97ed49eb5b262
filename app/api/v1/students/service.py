from datetime import date
from typing import Any, Dict, Iterable, Optional
from uuid import UUID

from app.auth.schemas import Principal
from app.core.capacity import CapacityGuard
from app.core.models import Classroom, Student
from app.core.operations import load_authorized, service_operation
from app.core.exceptions import NotFoundError
from app.core.responses import ServiceResult, deleted, success_list, success_single
from app.db.store import EntityStore, parse_id

from .schemas import StudentResponse

STUDENT_FIELDS = ("name", "email", "phone", "gender", "date_of_birth", "classroom_id")


def student_to_response(s: Student) -> StudentResponse:
    return StudentResponse.model_validate(s)


def student_values(fields: Dict[str, Any], allowed: Iterable[str] = STUDENT_FIELDS) -> Dict[str, Any]:
    """Column values for the supplied fields: strings trimmed, date_of_birth parsed, classroom_id as UUID."""
    values: Dict[str, Any] = {}
    for key in allowed:
        value = fields.get(key)
        if value is None:
            continue
        if isinstance(value, str):
            value = value.strip()
        if key == "date_of_birth" and not isinstance(value, date):
            value = date.fromisoformat(value)
        elif key == "classroom_id":
            value = parse_id(value)
        values[key] = value
    return values


async def email_taken(
    store: EntityStore,
    school_id: Optional[UUID],
    email: str,
    exclude_student_id: Optional[UUID] = None,
) -> bool:
    """Email uniqueness is per school and ignores soft-deleted students."""
    criteria = []
    if exclude_student_id is not None:
        criteria.append(Student.id != exclude_student_id)
    return await store.exists_active(Student, *criteria, email=email, school_id=school_id)


class StudentService:
    """Reads and removal of single students. Enrollment and moves live in enrollment.py / transfer.py."""

    def __init__(self, store: EntityStore, capacity: CapacityGuard) -> None:
        self.store = store
        self.capacity = capacity

    @service_operation("getting student")
    async def get(self, principal: Principal, student_id: Any) -> ServiceResult:
        student = await load_authorized(self.store, Student, student_id, principal, "Student not found")
        return success_single(student_to_response(student), "student", "Student fetched successfully")

    @service_operation("getting students by classroom id")
    async def list_by_classroom(self, principal: Principal, classroom_id: Any) -> ServiceResult:
        classroom = await load_authorized(self.store, Classroom, classroom_id, principal, "Classroom not found")
        students = await self.store.list_active(Student, classroom_id=classroom.id)
        return success_list([student_to_response(s) for s in students], "student", "Students fetched successfully")

    @service_operation("deleting student")
    async def delete(self, principal: Principal, student_id: Any) -> ServiceResult:
        student = await load_authorized(self.store, Student, student_id, principal, "Student not found")
        classroom_id = student.classroom_id
        removed = await self.store.soft_delete_by_id(Student, student.id)
        if removed is None:
            raise NotFoundError("Student not found")
        await self.capacity.release_seat(classroom_id)
        await self.store.commit()
        return deleted(student.id, "Student deleted successfully")
