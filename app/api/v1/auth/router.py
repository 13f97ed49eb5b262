from fastapi import APIRouter, Depends, HTTPException
from fastapi import status as http_status
from fastapi.responses import JSONResponse
from fastapi.security import OAuth2PasswordRequestForm

from app.api.deps import get_user_service
from app.api.v1.users.schemas import ChangePasswordRequest, LoginRequest
from app.api.v1.users.service import UserService
from app.auth.dependencies import get_current_principal
from app.auth.schemas import Principal

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


@router.post("/login", status_code=http_status.HTTP_200_OK)
async def login(
    payload: LoginRequest,
    service: UserService = Depends(get_user_service),
) -> JSONResponse:
    result = await service.login(payload.model_dump(exclude_unset=True))
    return result.to_response()


@router.post("/login-oauth")
async def login_oauth(
    form_data: OAuth2PasswordRequestForm = Depends(),
    service: UserService = Depends(get_user_service),
):
    """Form login for the OpenAPI "Authorize" button; returns the bare token pair."""
    result = await service.login(
        {"email": form_data.username.strip(), "password": form_data.password}
    )
    if not result.ok:
        raise HTTPException(status_code=result.code, detail=result.message)
    return {
        "access_token": result.data["access_token"],
        "token_type": "bearer",
    }


@router.post("/change-password")
async def change_password(
    payload: ChangePasswordRequest,
    principal: Principal = Depends(get_current_principal),
    service: UserService = Depends(get_user_service),
) -> JSONResponse:
    result = await service.change_password(principal, payload.model_dump(exclude_unset=True))
    return result.to_response()
