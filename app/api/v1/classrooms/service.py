import uuid
from typing import Any, Dict, List

from app.auth.schemas import Principal
from app.core.authorization import authorize, is_superadmin
from app.core.enums import SCHOOL_STAFF_ROLES
from app.core.exceptions import ConflictError, NotFoundError
from app.core.models import Classroom, School, Student
from app.core.operations import load_authorized, require_valid, service_operation
from app.core.responses import ServiceResult, created, deleted, success_list, success_single
from app.core.validation import SchemaValidator
from app.db.store import EntityStore, build_update_object

from app.api.v1.students.service import student_to_response

from .schemas import ClassroomResponse

CLASSROOM_UPDATE_FIELDS = ("name", "capacity", "resources")


def classroom_to_response(c: Classroom) -> ClassroomResponse:
    return ClassroomResponse.model_validate(c)


def new_resource_item(fields: Dict[str, Any]) -> Dict[str, Any]:
    """Resource dict as stored in Classroom.resources, with a fresh id."""
    return {
        "id": str(uuid.uuid4()),
        "type": fields["type"].strip(),
        "name": fields["name"].strip(),
        "quantity": fields["quantity"],
    }


class ClassroomService:
    def __init__(self, store: EntityStore, validator: SchemaValidator) -> None:
        self.store = store
        self.validator = validator

    @service_operation("creating classroom")
    async def create(self, principal: Principal, fields: Dict[str, Any]) -> ServiceResult:
        require_valid(self.validator, "classroom.create", fields)

        school = await self.store.find_active_by_id(School, fields["school_id"])
        if school is None:
            raise NotFoundError("School not found")

        authorize(principal, SCHOOL_STAFF_ROLES, school.id)

        name = fields["name"].strip()
        if await self.store.exists_active(Classroom, name=name, school_id=school.id):
            raise ConflictError("Classroom already exists")

        classroom = await self.store.create(
            Classroom,
            school_id=school.id,
            name=name,
            capacity=fields["capacity"],
            occupancy=0,
            resources=[new_resource_item(r) for r in fields.get("resources") or []],
        )
        await self.store.commit()
        return created(classroom_to_response(classroom), "classroom", "Classroom created successfully")

    @service_operation("getting classrooms")
    async def list_classrooms(self, principal: Principal) -> ServiceResult:
        authorize(principal, SCHOOL_STAFF_ROLES)
        # Superadmin sees every classroom, admin only their school's
        if is_superadmin(principal):
            classrooms = await self.store.list_active(Classroom)
        else:
            classrooms = await self.store.list_active(Classroom, school_id=principal.tenant_id)
        return success_list([classroom_to_response(c) for c in classrooms], "classroom", "Classrooms fetched successfully")

    @service_operation("getting classroom by id")
    async def get(self, principal: Principal, classroom_id: Any) -> ServiceResult:
        classroom = await load_authorized(self.store, Classroom, classroom_id, principal, "Classroom not found")
        return success_single(classroom_to_response(classroom), "classroom", "Classroom fetched successfully")

    @service_operation("updating classroom")
    async def update(self, principal: Principal, classroom_id: Any, fields: Dict[str, Any]) -> ServiceResult:
        require_valid(self.validator, "classroom.update", fields)

        classroom = await load_authorized(self.store, Classroom, classroom_id, principal, "Classroom not found")

        updates = build_update_object(fields, CLASSROOM_UPDATE_FIELDS)
        if "name" in updates:
            updates["name"] = updates["name"].strip()
            if updates["name"] != classroom.name and await self.store.exists_active(
                Classroom, Classroom.id != classroom.id, name=updates["name"], school_id=classroom.school_id
            ):
                raise ConflictError("Classroom already exists. Please use a different name.")

        if "capacity" in updates:
            enrolled = await self.store.count_active(Student, classroom_id=classroom.id)
            if updates["capacity"] < enrolled:
                raise ConflictError(
                    f"Capacity cannot be lower than the number of enrolled students ({enrolled})"
                )

        if "resources" in updates:
            updates["resources"] = [new_resource_item(r) for r in updates["resources"]]

        updated = await self.store.update_active_by_id(Classroom, classroom.id, updates)
        if updated is None:
            raise NotFoundError("Classroom not found")
        await self.store.commit()
        return success_single(classroom_to_response(updated), "classroom", "Classroom updated successfully")

    @service_operation("deleting classroom")
    async def delete(self, principal: Principal, classroom_id: Any) -> ServiceResult:
        classroom = await load_authorized(self.store, Classroom, classroom_id, principal, "Classroom not found")

        # Students would otherwise be left in a deleted classroom
        if await self.store.exists_active(Student, classroom_id=classroom.id):
            raise ConflictError("Cannot delete classroom: it has enrolled students")

        removed = await self.store.soft_delete_by_id(Classroom, classroom.id)
        if removed is None:
            raise NotFoundError("Classroom not found")
        await self.store.commit()
        return deleted(classroom.id, "Classroom deleted successfully")

    @service_operation("getting students")
    async def students(self, principal: Principal, classroom_id: Any) -> ServiceResult:
        classroom = await load_authorized(self.store, Classroom, classroom_id, principal, "Classroom not found")
        students: List[Student] = await self.store.list_active(Student, classroom_id=classroom.id)
        return success_list([student_to_response(s) for s in students], "student", "Students fetched successfully")
