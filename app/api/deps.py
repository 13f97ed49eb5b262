"""
Composition root: every service is built per request from explicit collaborators.
FastAPI caches dependencies within a request, so all services of one request share
the same session-bound store.
"""
from functools import lru_cache

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.classrooms import rules as classroom_rules
from app.api.v1.classrooms.resources import ClassroomResourceLedger
from app.api.v1.classrooms.service import ClassroomService
from app.api.v1.schools import rules as school_rules
from app.api.v1.schools.service import SchoolService
from app.api.v1.students import rules as student_rules
from app.api.v1.students.enrollment import EnrollmentService
from app.api.v1.students.service import StudentService
from app.api.v1.students.transfer import TransferCoordinator
from app.api.v1.users import rules as user_rules
from app.api.v1.users.service import UserService
from app.core.capacity import CapacityGuard
from app.core.config import settings
from app.core.enums import CapacityMode
from app.core.validation import SchemaValidator
from app.db.session import get_db
from app.db.store import EntityStore

RULE_SETS = {
    **school_rules.RULE_SETS,
    **classroom_rules.RULE_SETS,
    **student_rules.RULE_SETS,
    **user_rules.RULE_SETS,
}


@lru_cache
def get_validator() -> SchemaValidator:
    return SchemaValidator(RULE_SETS)


def get_store(db: AsyncSession = Depends(get_db)) -> EntityStore:
    return EntityStore(db)


def get_capacity_guard(store: EntityStore = Depends(get_store)) -> CapacityGuard:
    return CapacityGuard(store, CapacityMode(settings.capacity_mode))


def get_enrollment_service(
    store: EntityStore = Depends(get_store),
    validator: SchemaValidator = Depends(get_validator),
    capacity: CapacityGuard = Depends(get_capacity_guard),
) -> EnrollmentService:
    return EnrollmentService(store, validator, capacity)


def get_transfer_coordinator(
    store: EntityStore = Depends(get_store),
    validator: SchemaValidator = Depends(get_validator),
    capacity: CapacityGuard = Depends(get_capacity_guard),
) -> TransferCoordinator:
    return TransferCoordinator(store, validator, capacity)


def get_student_service(
    store: EntityStore = Depends(get_store),
    capacity: CapacityGuard = Depends(get_capacity_guard),
) -> StudentService:
    return StudentService(store, capacity)


def get_classroom_service(
    store: EntityStore = Depends(get_store),
    validator: SchemaValidator = Depends(get_validator),
) -> ClassroomService:
    return ClassroomService(store, validator)


def get_resource_ledger(
    store: EntityStore = Depends(get_store),
    validator: SchemaValidator = Depends(get_validator),
) -> ClassroomResourceLedger:
    return ClassroomResourceLedger(store, validator)


def get_school_service(
    store: EntityStore = Depends(get_store),
    validator: SchemaValidator = Depends(get_validator),
) -> SchoolService:
    return SchoolService(store, validator)


def get_user_service(
    store: EntityStore = Depends(get_store),
    validator: SchemaValidator = Depends(get_validator),
) -> UserService:
    return UserService(store, validator)
