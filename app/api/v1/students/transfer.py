from typing import Any, Dict, Optional
from uuid import UUID

from app.auth.schemas import Principal
from app.core.authorization import authorize, is_superadmin
from app.core.capacity import CapacityGuard
from app.core.enums import SCHOOL_STAFF_ROLES
from app.core.exceptions import ConflictError, NotFoundError, ValidationError
from app.core.logging import get_logger
from app.core.models import Classroom, Student
from app.core.operations import require_valid, service_operation
from app.core.responses import ServiceResult, success_single
from app.core.validation import SchemaValidator
from app.db.store import EntityStore, build_update_object, parse_id

from .service import STUDENT_FIELDS, email_taken, student_to_response, student_values

logger = get_logger(__name__)

CROSS_SCHOOL_MESSAGE = "Cannot transfer student to different school"


def _ensure_same_school_unless_superadmin(
    principal: Principal,
    current_school_id: Optional[UUID],
    target_school_id: Optional[UUID],
) -> None:
    """Moving a student between schools is reserved to superadmins."""
    if not is_superadmin(principal) and current_school_id != target_school_id:
        raise ValidationError(CROSS_SCHOOL_MESSAGE)


class TransferCoordinator:
    """Moves students between classrooms while keeping school_id and seat counts in step."""

    def __init__(self, store: EntityStore, validator: SchemaValidator, capacity: CapacityGuard) -> None:
        self.store = store
        self.validator = validator
        self.capacity = capacity

    async def _move_seat(self, source_classroom_id: UUID, target: Classroom) -> None:
        await self.capacity.claim_seat(target)
        await self.capacity.release_seat(source_classroom_id)

    @service_operation("updating student")
    async def update_with_optional_classroom_change(
        self,
        principal: Principal,
        student_id: Any,
        fields: Dict[str, Any],
    ) -> ServiceResult:
        require_valid(self.validator, "student.update", fields)

        student = await self.store.find_active_by_id(Student, student_id)
        if student is None:
            raise NotFoundError("Student not found")

        requested_id = parse_id(fields.get("classroom_id"))
        changing = requested_id is not None and requested_id != student.classroom_id

        # Changing: resolve the target. Unchanged: the current classroom, for access only.
        classroom = await self.store.find_active_by_id(
            Classroom, requested_id if changing else student.classroom_id
        )
        if classroom is None:
            raise NotFoundError("Classroom not found")

        authorize(principal, SCHOOL_STAFF_ROLES, student.school_id)
        authorize(principal, SCHOOL_STAFF_ROLES, classroom.school_id)

        if changing:
            _ensure_same_school_unless_superadmin(principal, student.school_id, classroom.school_id)
            capacity_error = await self.capacity.validate_capacity(
                classroom.id, classroom.capacity, exclude_occupant_id=student.id
            )
            if capacity_error:
                raise ConflictError(capacity_error)

        updates = build_update_object(student_values(fields), STUDENT_FIELDS)
        updates.pop("classroom_id", None)
        target_school_id = classroom.school_id if changing else student.school_id

        # A classroom change may land the student in a school where the current email is already used
        email = updates.get("email") or (student.email if changing else None)
        if email and await email_taken(self.store, target_school_id, email, exclude_student_id=student.id):
            raise ConflictError("Student already exists in this school")

        source_classroom_id = student.classroom_id
        if changing:
            updates.update(classroom_id=classroom.id, school_id=classroom.school_id)
            await self._move_seat(source_classroom_id, classroom)

        updated = await self.store.update_active_by_id(
            Student, student.id, updates, Student.classroom_id == source_classroom_id
        )
        if updated is None:
            raise NotFoundError("Student not found")
        await self.store.commit()

        return success_single(student_to_response(updated), "student", "Student updated successfully")

    @service_operation("transferring student")
    async def transfer(self, principal: Principal, student_id: Any, target_classroom_id: Any) -> ServiceResult:
        require_valid(self.validator, "student.transfer", {"target_classroom_id": target_classroom_id})

        student = await self.store.find_active_by_id(Student, student_id)
        if student is None:
            raise NotFoundError("Student not found")

        current = await self.store.find_active_by_id(Classroom, student.classroom_id)
        if current is None:
            raise NotFoundError("Current classroom not found")

        target = await self.store.find_active_by_id(Classroom, target_classroom_id)
        if target is None:
            raise NotFoundError("Target classroom not found")

        current_school_id = student.school_id or current.school_id
        authorize(principal, SCHOOL_STAFF_ROLES, current_school_id)
        authorize(principal, SCHOOL_STAFF_ROLES, target.school_id)

        _ensure_same_school_unless_superadmin(principal, current_school_id, target.school_id)

        if student.classroom_id == target.id:
            raise ConflictError("Student is already in the target classroom")

        capacity_error = await self.capacity.validate_capacity(
            target.id, target.capacity, exclude_occupant_id=student.id
        )
        if capacity_error:
            raise ConflictError(capacity_error)

        if await email_taken(self.store, target.school_id, student.email, exclude_student_id=student.id):
            raise ConflictError("Student already exists in this school")

        await self._move_seat(current.id, target)
        updated = await self.store.update_active_by_id(
            Student,
            student.id,
            {"classroom_id": target.id, "school_id": target.school_id},
            Student.classroom_id == current.id,
        )
        if updated is None:
            raise NotFoundError("Student not found")
        await self.store.commit()

        logger.info(
            "Student transferred successfully",
            student_id=str(student.id),
            from_classroom=str(current.id),
            to_classroom=str(target.id),
            school_id=str(target.school_id),
        )
        return success_single(student_to_response(updated), "student", "Student transferred successfully")
