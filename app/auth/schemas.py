from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from app.core.enums import Role


class Principal(BaseModel):
    """Authenticated actor for the duration of one request.
    tenant_id is the school the user administers; None for superadmins and unassigned admins.
    """

    role: Role
    tenant_id: Optional[UUID] = None
    subject_id: UUID

    class Config:
        frozen = True
