from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt

from app.api.deps import get_store
from app.auth.models import User
from app.auth.schemas import Principal
from app.core.config import settings
from app.core.enums import Role
from app.db.store import EntityStore


oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login-oauth")


async def get_current_principal(
    token: str = Depends(oauth2_scheme),
    store: EntityStore = Depends(get_store),
) -> Principal:
    """Resolve the acting principal from the access token. Role and school come from the stored user."""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError:
        raise credentials_exception

    user_id_str = payload.get("user_id") or payload.get("sub")
    if not user_id_str:
        raise credentials_exception
    try:
        user_id = UUID(user_id_str)
    except ValueError:
        raise credentials_exception

    user = await store.find_active_by_id(User, user_id)
    if user is None:
        raise credentials_exception

    try:
        role = Role(user.role)
    except ValueError:
        raise credentials_exception

    return Principal(role=role, tenant_id=user.school_id, subject_id=user.id)
