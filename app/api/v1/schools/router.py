from uuid import UUID

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from app.api.deps import get_school_service
from app.auth.dependencies import get_current_principal
from app.auth.schemas import Principal

from .schemas import AssignAdminRequest, SchoolCreate, SchoolUpdate
from .service import SchoolService

router = APIRouter(prefix="/api/v1/schools", tags=["schools"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_school(
    payload: SchoolCreate,
    principal: Principal = Depends(get_current_principal),
    service: SchoolService = Depends(get_school_service),
) -> JSONResponse:
    result = await service.create(principal, payload.model_dump(exclude_unset=True))
    return result.to_response()


@router.get("")
async def list_schools(
    principal: Principal = Depends(get_current_principal),
    service: SchoolService = Depends(get_school_service),
) -> JSONResponse:
    result = await service.list_schools(principal)
    return result.to_response()


@router.post("/assign-admin")
async def assign_admin(
    payload: AssignAdminRequest,
    principal: Principal = Depends(get_current_principal),
    service: SchoolService = Depends(get_school_service),
) -> JSONResponse:
    result = await service.assign_admin(principal, payload.model_dump(exclude_unset=True))
    return result.to_response()


@router.get("/{school_id}")
async def get_school(
    school_id: UUID,
    principal: Principal = Depends(get_current_principal),
    service: SchoolService = Depends(get_school_service),
) -> JSONResponse:
    result = await service.get(principal, school_id)
    return result.to_response()


@router.patch("/{school_id}")
async def update_school(
    school_id: UUID,
    payload: SchoolUpdate,
    principal: Principal = Depends(get_current_principal),
    service: SchoolService = Depends(get_school_service),
) -> JSONResponse:
    result = await service.update(principal, school_id, payload.model_dump(exclude_unset=True))
    return result.to_response()


@router.delete("/{school_id}")
async def delete_school(
    school_id: UUID,
    principal: Principal = Depends(get_current_principal),
    service: SchoolService = Depends(get_school_service),
) -> JSONResponse:
    result = await service.delete(principal, school_id)
    return result.to_response()
