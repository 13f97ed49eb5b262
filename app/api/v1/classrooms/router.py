from uuid import UUID

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from app.api.deps import get_classroom_service, get_resource_ledger
from app.auth.dependencies import get_current_principal
from app.auth.schemas import Principal

from .resources import ClassroomResourceLedger
from .schemas import ClassroomCreate, ClassroomUpdate, ResourceInput
from .service import ClassroomService

router = APIRouter(prefix="/api/v1/classrooms", tags=["classrooms"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_classroom(
    payload: ClassroomCreate,
    principal: Principal = Depends(get_current_principal),
    service: ClassroomService = Depends(get_classroom_service),
) -> JSONResponse:
    result = await service.create(principal, payload.model_dump(exclude_unset=True))
    return result.to_response()


@router.get("")
async def list_classrooms(
    principal: Principal = Depends(get_current_principal),
    service: ClassroomService = Depends(get_classroom_service),
) -> JSONResponse:
    """Superadmin gets every classroom; admin only their own school's."""
    result = await service.list_classrooms(principal)
    return result.to_response()


@router.get("/{classroom_id}")
async def get_classroom(
    classroom_id: UUID,
    principal: Principal = Depends(get_current_principal),
    service: ClassroomService = Depends(get_classroom_service),
) -> JSONResponse:
    result = await service.get(principal, classroom_id)
    return result.to_response()


@router.patch("/{classroom_id}")
async def update_classroom(
    classroom_id: UUID,
    payload: ClassroomUpdate,
    principal: Principal = Depends(get_current_principal),
    service: ClassroomService = Depends(get_classroom_service),
) -> JSONResponse:
    result = await service.update(principal, classroom_id, payload.model_dump(exclude_unset=True))
    return result.to_response()


@router.delete("/{classroom_id}")
async def delete_classroom(
    classroom_id: UUID,
    principal: Principal = Depends(get_current_principal),
    service: ClassroomService = Depends(get_classroom_service),
) -> JSONResponse:
    result = await service.delete(principal, classroom_id)
    return result.to_response()


@router.get("/{classroom_id}/students")
async def list_classroom_students(
    classroom_id: UUID,
    principal: Principal = Depends(get_current_principal),
    service: ClassroomService = Depends(get_classroom_service),
) -> JSONResponse:
    result = await service.students(principal, classroom_id)
    return result.to_response()


@router.post("/{classroom_id}/resources", status_code=status.HTTP_201_CREATED)
async def add_classroom_resource(
    classroom_id: UUID,
    payload: ResourceInput,
    principal: Principal = Depends(get_current_principal),
    ledger: ClassroomResourceLedger = Depends(get_resource_ledger),
) -> JSONResponse:
    result = await ledger.add_resource(principal, classroom_id, payload.model_dump(exclude_unset=True))
    return result.to_response()


@router.patch("/{classroom_id}/resources/{resource_id}")
async def update_classroom_resource(
    classroom_id: UUID,
    resource_id: UUID,
    payload: ResourceInput,
    principal: Principal = Depends(get_current_principal),
    ledger: ClassroomResourceLedger = Depends(get_resource_ledger),
) -> JSONResponse:
    result = await ledger.update_resource(
        principal, classroom_id, str(resource_id), payload.model_dump(exclude_unset=True)
    )
    return result.to_response()


@router.delete("/{classroom_id}/resources/{resource_id}")
async def remove_classroom_resource(
    classroom_id: UUID,
    resource_id: UUID,
    principal: Principal = Depends(get_current_principal),
    ledger: ClassroomResourceLedger = Depends(get_resource_ledger),
) -> JSONResponse:
    result = await ledger.remove_resource(principal, classroom_id, resource_id)
    return result.to_response()
