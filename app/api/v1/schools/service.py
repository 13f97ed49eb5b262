from typing import Any, Dict

from app.auth.models import User
from app.auth.schemas import Principal
from app.core.authorization import authorize
from app.core.enums import SCHOOL_STAFF_ROLES, Role
from app.core.exceptions import ConflictError, NotFoundError, ValidationError
from app.core.models import Classroom, School, Student
from app.core.operations import load_authorized, require_valid, service_operation
from app.core.responses import ServiceResult, created, deleted, success, success_list, success_single
from app.core.validation import SchemaValidator
from app.db.store import EntityStore, build_update_object

from app.api.v1.users.service import user_to_response

from .schemas import SchoolOverview, SchoolResponse

SCHOOL_FIELDS = ("name", "address", "email", "phone", "website", "logo")
SUPERADMIN_ONLY = (Role.SUPERADMIN,)


def school_to_response(s: School) -> SchoolResponse:
    return SchoolResponse.model_validate(s)


def _clean(fields: Dict[str, Any]) -> Dict[str, Any]:
    values = build_update_object(fields, SCHOOL_FIELDS)
    return {k: v.strip() if isinstance(v, str) else v for k, v in values.items()}


class SchoolService:
    def __init__(self, store: EntityStore, validator: SchemaValidator) -> None:
        self.store = store
        self.validator = validator

    @service_operation("creating school")
    async def create(self, principal: Principal, fields: Dict[str, Any]) -> ServiceResult:
        authorize(principal, SUPERADMIN_ONLY)
        require_valid(self.validator, "school.create", fields)

        values = _clean(fields)
        if await self.store.exists_active(School, name=values["name"]):
            raise ConflictError("School already exists")

        school = await self.store.create(School, **values)
        await self.store.commit()
        return created(school_to_response(school), "school", "School created successfully")

    @service_operation("getting schools")
    async def list_schools(self, principal: Principal) -> ServiceResult:
        authorize(principal, SUPERADMIN_ONLY)
        overviews = []
        for school in await self.store.list_active(School):
            admins = await self.store.list_active(User, school_id=school.id, role=Role.ADMIN.value)
            overviews.append(
                SchoolOverview(
                    **school_to_response(school).model_dump(),
                    admins=[user_to_response(u) for u in admins],
                    classroom_count=await self.store.count_active(Classroom, school_id=school.id),
                    student_count=await self.store.count_active(Student, school_id=school.id),
                )
            )
        return success_list(overviews, "school", "Schools fetched successfully")

    @service_operation("getting school by id")
    async def get(self, principal: Principal, school_id: Any) -> ServiceResult:
        school = await load_authorized(
            self.store,
            School,
            school_id,
            principal,
            "School not found",
            allowed_roles=SCHOOL_STAFF_ROLES,
            tenant_of=lambda s: s.id,
        )
        return success_single(school_to_response(school), "school", "School fetched successfully")

    @service_operation("updating school")
    async def update(self, principal: Principal, school_id: Any, fields: Dict[str, Any]) -> ServiceResult:
        authorize(principal, SUPERADMIN_ONLY)
        require_valid(self.validator, "school.update", fields)

        values = _clean(fields)
        if "name" in values:
            school = await self.store.find_active_by_id(School, school_id)
            if school is None:
                raise NotFoundError("School not found")
            if await self.store.exists_active(School, School.id != school.id, name=values["name"]):
                raise ConflictError("School already exists")

        updated = await self.store.update_active_by_id(School, school_id, values)
        if updated is None:
            raise NotFoundError("School not found")
        await self.store.commit()
        return success_single(school_to_response(updated), "school", "School updated successfully")

    @service_operation("deleting school")
    async def delete(self, principal: Principal, school_id: Any) -> ServiceResult:
        authorize(principal, SUPERADMIN_ONLY)
        removed = await self.store.soft_delete_by_id(School, school_id)
        if removed is None:
            raise NotFoundError("School not found")
        await self.store.commit()
        return deleted(removed.id, "School deleted successfully")

    @service_operation("assigning admin")
    async def assign_admin(self, principal: Principal, fields: Dict[str, Any]) -> ServiceResult:
        authorize(principal, SUPERADMIN_ONLY)
        require_valid(self.validator, "school.assign_admin", fields)

        user = await self.store.find_active_by_id(User, fields["user_id"])
        if user is None:
            raise NotFoundError("User not found")
        if user.role != Role.ADMIN.value:
            raise ValidationError("User can not be assigned to a school as admin, Kindly check the user role")

        school = await self.store.find_active_by_id(School, fields["school_id"])
        if school is None:
            raise NotFoundError("School not found")

        updated = await self.store.update_active_by_id(User, user.id, {"school_id": school.id})
        if updated is None:
            raise NotFoundError("User not found")
        await self.store.commit()
        return success(
            {
                "user": user_to_response(updated),
                "school": {"id": str(school.id), "name": school.name},
            },
            "Admin assigned to school successfully",
        )
