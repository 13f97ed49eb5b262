from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from app.api.v1.users.schemas import UserResponse


class SchoolCreate(BaseModel):
    name: Optional[str] = None
    address: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    logo: Optional[str] = None


class SchoolUpdate(SchoolCreate):
    pass


class AssignAdminRequest(BaseModel):
    user_id: Optional[str] = None
    school_id: Optional[str] = None


class SchoolResponse(BaseModel):
    id: UUID
    name: str
    address: str
    email: str
    phone: str
    website: Optional[str] = None
    logo: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class SchoolOverview(SchoolResponse):
    """School as listed for superadmins: its admins and active classroom/student counts."""

    admins: List[UserResponse] = Field(default_factory=list)
    classroom_count: int = 0
    student_count: int = 0
