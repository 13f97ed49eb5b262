from uuid import uuid4

import pytest

from app.auth.schemas import Principal
from app.core.authorization import authorize, is_superadmin
from app.core.enums import SCHOOL_STAFF_ROLES, Role
from app.core.exceptions import AuthorizationError


def test_superadmin_passes_any_tenant() -> None:
    principal = Principal(role=Role.SUPERADMIN, tenant_id=None, subject_id=uuid4())
    authorize(principal, SCHOOL_STAFF_ROLES, uuid4())
    assert is_superadmin(principal)


def test_admin_same_tenant_allowed() -> None:
    school_id = uuid4()
    principal = Principal(role=Role.ADMIN, tenant_id=school_id, subject_id=uuid4())
    authorize(principal, SCHOOL_STAFF_ROLES, school_id)
    # string ids compare equal to UUIDs
    authorize(principal, SCHOOL_STAFF_ROLES, str(school_id))


def test_admin_other_tenant_denied() -> None:
    principal = Principal(role=Role.ADMIN, tenant_id=uuid4(), subject_id=uuid4())
    with pytest.raises(AuthorizationError) as exc:
        authorize(principal, SCHOOL_STAFF_ROLES, uuid4())
    assert exc.value.message == "Access denied"
    assert exc.value.status_code == 403


def test_role_not_allowed_denied_even_with_matching_tenant() -> None:
    school_id = uuid4()
    principal = Principal(role=Role.ADMIN, tenant_id=school_id, subject_id=uuid4())
    with pytest.raises(AuthorizationError):
        authorize(principal, (Role.SUPERADMIN,), school_id)


def test_without_target_only_role_is_checked() -> None:
    principal = Principal(role=Role.ADMIN, tenant_id=uuid4(), subject_id=uuid4())
    authorize(principal, SCHOOL_STAFF_ROLES)


def test_admin_without_tenant_passes_tenant_check() -> None:
    principal = Principal(role=Role.ADMIN, tenant_id=None, subject_id=uuid4())
    authorize(principal, SCHOOL_STAFF_ROLES, uuid4())
    assert not is_superadmin(principal)
