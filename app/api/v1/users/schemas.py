from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel


class UserCreate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    role: Optional[str] = None
    school_id: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class ChangePasswordRequest(BaseModel):
    old_password: Optional[str] = None
    new_password: Optional[str] = None


class UserResponse(BaseModel):
    """User as returned by the API. Never carries the password hash."""

    id: UUID
    name: str
    email: str
    role: str
    school_id: Optional[UUID] = None
    is_temporary_password: bool = False
    created_at: datetime

    class Config:
        from_attributes = True
