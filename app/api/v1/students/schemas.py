from datetime import date, datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel


class StudentEnroll(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    gender: Optional[str] = None
    date_of_birth: Optional[str] = None  # YYYY-MM-DD
    classroom_id: Optional[str] = None


class StudentUpdate(BaseModel):
    """Partial update: only supplied fields are written. Changing classroom_id moves the student."""

    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    gender: Optional[str] = None
    date_of_birth: Optional[str] = None
    classroom_id: Optional[str] = None


class StudentTransfer(BaseModel):
    target_classroom_id: Optional[str] = None


class StudentResponse(BaseModel):
    id: UUID
    school_id: UUID
    classroom_id: UUID
    name: str
    email: str
    phone: str
    gender: str
    date_of_birth: date
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
