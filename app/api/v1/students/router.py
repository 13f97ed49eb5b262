from uuid import UUID

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from app.api.deps import (
    get_enrollment_service,
    get_student_service,
    get_transfer_coordinator,
)
from app.auth.dependencies import get_current_principal
from app.auth.schemas import Principal

from .enrollment import EnrollmentService
from .schemas import StudentEnroll, StudentTransfer, StudentUpdate
from .service import StudentService
from .transfer import TransferCoordinator

router = APIRouter(prefix="/api/v1/students", tags=["students"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def enroll_student(
    payload: StudentEnroll,
    principal: Principal = Depends(get_current_principal),
    service: EnrollmentService = Depends(get_enrollment_service),
) -> JSONResponse:
    result = await service.enroll(principal, payload.model_dump(exclude_unset=True))
    return result.to_response()


@router.get("/classroom/{classroom_id}")
async def list_students_by_classroom(
    classroom_id: UUID,
    principal: Principal = Depends(get_current_principal),
    service: StudentService = Depends(get_student_service),
) -> JSONResponse:
    result = await service.list_by_classroom(principal, classroom_id)
    return result.to_response()


@router.get("/{student_id}")
async def get_student(
    student_id: UUID,
    principal: Principal = Depends(get_current_principal),
    service: StudentService = Depends(get_student_service),
) -> JSONResponse:
    result = await service.get(principal, student_id)
    return result.to_response()


@router.patch("/{student_id}")
async def update_student(
    student_id: UUID,
    payload: StudentUpdate,
    principal: Principal = Depends(get_current_principal),
    coordinator: TransferCoordinator = Depends(get_transfer_coordinator),
) -> JSONResponse:
    """Partial update. Supplying a different classroom_id moves the student (capacity checked)."""
    result = await coordinator.update_with_optional_classroom_change(
        principal, student_id, payload.model_dump(exclude_unset=True)
    )
    return result.to_response()


@router.patch("/{student_id}/transfer")
async def transfer_student(
    student_id: UUID,
    payload: StudentTransfer,
    principal: Principal = Depends(get_current_principal),
    coordinator: TransferCoordinator = Depends(get_transfer_coordinator),
) -> JSONResponse:
    result = await coordinator.transfer(principal, student_id, payload.target_classroom_id)
    return result.to_response()


@router.delete("/{student_id}")
async def delete_student(
    student_id: UUID,
    principal: Principal = Depends(get_current_principal),
    service: StudentService = Depends(get_student_service),
) -> JSONResponse:
    result = await service.delete(principal, student_id)
    return result.to_response()
