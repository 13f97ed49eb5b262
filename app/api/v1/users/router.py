from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from app.api.deps import get_user_service
from app.auth.dependencies import get_current_principal
from app.auth.schemas import Principal

from .schemas import UserCreate
from .service import UserService

router = APIRouter(prefix="/api/v1/users", tags=["users"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_user(
    payload: UserCreate,
    principal: Principal = Depends(get_current_principal),
    service: UserService = Depends(get_user_service),
) -> JSONResponse:
    result = await service.create_user(principal, payload.model_dump(exclude_unset=True))
    return result.to_response()


@router.get("")
async def list_users(
    principal: Principal = Depends(get_current_principal),
    service: UserService = Depends(get_user_service),
) -> JSONResponse:
    result = await service.list_users(principal)
    return result.to_response()
