from typing import Any, Dict

from app.auth.schemas import Principal
from app.core.authorization import authorize
from app.core.capacity import CapacityGuard
from app.core.enums import SCHOOL_STAFF_ROLES
from app.core.exceptions import ConflictError, NotFoundError, ValidationError
from app.core.logging import get_logger
from app.core.models import Classroom, Student
from app.core.operations import require_valid, service_operation
from app.core.responses import ServiceResult, created
from app.core.validation import SchemaValidator
from app.db.store import EntityStore

from .service import email_taken, student_to_response, student_values

logger = get_logger(__name__)


class EnrollmentService:
    """
    Creates a student inside a classroom.

    Checks run in a fixed order and stop at the first failure: payload, classroom,
    access, owning school, capacity, duplicate email. Nothing is written before
    all of them pass.
    """

    def __init__(self, store: EntityStore, validator: SchemaValidator, capacity: CapacityGuard) -> None:
        self.store = store
        self.validator = validator
        self.capacity = capacity

    @service_operation("creating student")
    async def enroll(self, principal: Principal, fields: Dict[str, Any]) -> ServiceResult:
        require_valid(self.validator, "student.enroll", fields)

        classroom = await self.store.find_active_by_id(Classroom, fields["classroom_id"])
        if classroom is None:
            raise NotFoundError("Classroom not found")

        authorize(principal, SCHOOL_STAFF_ROLES, classroom.school_id)

        if classroom.school_id is None:
            raise ValidationError("Classroom must be associated with a school")

        capacity_error = await self.capacity.validate_capacity(classroom.id, classroom.capacity)
        if capacity_error:
            raise ConflictError(capacity_error)

        values = student_values(fields)
        if await email_taken(self.store, classroom.school_id, values["email"]):
            raise ConflictError("Student already exists in this school")

        await self.capacity.claim_seat(classroom)
        values.update(classroom_id=classroom.id, school_id=classroom.school_id)
        student = await self.store.create(Student, **values)
        await self.store.commit()

        logger.info(
            "Student enrolled successfully",
            student_id=str(student.id),
            classroom_id=str(classroom.id),
            school_id=str(classroom.school_id),
        )
        return created(student_to_response(student), "student", "Student enrolled successfully")
