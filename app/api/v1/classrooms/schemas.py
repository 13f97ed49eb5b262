from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field


class ResourceItem(BaseModel):
    """Inventory line kept inside the classroom document (e.g. type=furniture, name=desk, quantity=30)."""

    id: UUID
    type: str
    name: str
    quantity: int


class ResourceInput(BaseModel):
    type: Optional[str] = None
    name: Optional[str] = None
    quantity: Optional[int] = None


class ClassroomCreate(BaseModel):
    name: Optional[str] = None
    school_id: Optional[str] = None
    capacity: Optional[int] = Field(None, description="Max students seated in the classroom")
    resources: Optional[List[ResourceInput]] = None


class ClassroomUpdate(BaseModel):
    name: Optional[str] = None
    capacity: Optional[int] = None
    resources: Optional[List[ResourceInput]] = None


class ClassroomResponse(BaseModel):
    id: UUID
    school_id: UUID
    name: str
    capacity: int
    resources: List[ResourceItem] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
