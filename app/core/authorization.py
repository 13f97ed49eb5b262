"""Tenant-scoped access decision. Pure function; callers pass the entity's own school id."""
from typing import Iterable, Optional
from uuid import UUID

from app.auth.schemas import Principal
from app.core.enums import Role
from app.core.exceptions import AuthorizationError

ACCESS_DENIED_MESSAGE = "Access denied"


def authorize(
    principal: Principal,
    allowed_roles: Iterable[Role],
    target_tenant_id: Optional[UUID] = None,
) -> None:
    """
    Raise AuthorizationError unless the principal may act on an entity owned by target_tenant_id.

    - The principal's role must be in allowed_roles.
    - A superadmin passes every tenant check.
    - Anyone else is denied when both the principal's tenant and the target tenant
      are known and differ. Without a target tenant (listing, school-wide actions)
      only the role check applies.
    """
    if principal.role not in set(allowed_roles):
        raise AuthorizationError(ACCESS_DENIED_MESSAGE)

    if principal.role == Role.SUPERADMIN:
        return

    if (
        principal.tenant_id is not None
        and target_tenant_id is not None
        and str(principal.tenant_id) != str(target_tenant_id)
    ):
        raise AuthorizationError(ACCESS_DENIED_MESSAGE)


def is_superadmin(principal: Principal) -> bool:
    return principal.role == Role.SUPERADMIN
