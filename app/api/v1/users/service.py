from typing import Any, Dict

from fastapi import status

from app.auth.models import User
from app.auth.schemas import Principal
from app.auth.security import hash_password, token_for_user, verify_password
from app.core.authorization import authorize, is_superadmin
from app.core.enums import SCHOOL_STAFF_ROLES, Role
from app.core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from app.core.models import School
from app.core.operations import require_valid, service_operation
from app.core.responses import ServiceResult, success
from app.core.validation import SchemaValidator
from app.db.store import EntityStore, parse_id

from .schemas import UserResponse

INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"


def user_to_response(u: User) -> UserResponse:
    return UserResponse.model_validate(u)


class UserService:
    def __init__(self, store: EntityStore, validator: SchemaValidator) -> None:
        self.store = store
        self.validator = validator

    @service_operation("creating user")
    async def create_user(self, principal: Principal, fields: Dict[str, Any]) -> ServiceResult:
        authorize(principal, (Role.SUPERADMIN,))
        require_valid(self.validator, "user.create", fields)

        email = fields["email"].strip()
        if await self.store.exists_active(User, email=email):
            raise ConflictError("User already exists")

        school_id = parse_id(fields.get("school_id"))
        if school_id is not None and not await self.store.exists_active(School, School.id == school_id):
            raise NotFoundError("School not found")

        user = await self.store.create(
            User,
            name=fields["name"].strip(),
            email=email,
            password_hash=hash_password(fields["password"]),
            role=fields["role"],
            school_id=school_id,
        )
        await self.store.commit()
        return success(
            {"user": user_to_response(user), "access_token": token_for_user(user)},
            "User created successfully",
            status.HTTP_201_CREATED,
        )

    @service_operation("logging in")
    async def login(self, fields: Dict[str, Any]) -> ServiceResult:
        require_valid(self.validator, "user.login", fields)

        user = await self.store.find_one_active(User, email=fields["email"].strip())
        if user is None or not verify_password(fields["password"], user.password_hash):
            raise ValidationError(INVALID_CREDENTIALS_MESSAGE)

        return success(
            {
                "user": user_to_response(user),
                "access_token": token_for_user(user),
                "token_type": "bearer",
            },
            "Login successful",
        )

    @service_operation("changing password")
    async def change_password(self, principal: Principal, fields: Dict[str, Any]) -> ServiceResult:
        require_valid(self.validator, "user.change_password", fields)

        user = await self.store.find_active_by_id(User, principal.subject_id)
        if user is None:
            raise NotFoundError("User not found")

        if not verify_password(fields["old_password"], user.password_hash):
            raise ValidationError("Invalid old password")
        if fields["new_password"] == fields["old_password"]:
            raise ValidationError("New password cannot be the same as old password")

        updated = await self.store.update_active_by_id(
            User,
            user.id,
            {"password_hash": hash_password(fields["new_password"]), "is_temporary_password": False},
        )
        if updated is None:
            raise NotFoundError("User not found")
        await self.store.commit()
        return success({"user_id": str(updated.id)}, "Password changed successfully")

    @service_operation("getting users")
    async def list_users(self, principal: Principal) -> ServiceResult:
        authorize(principal, SCHOOL_STAFF_ROLES)
        if is_superadmin(principal):
            users = await self.store.list_active(User)
        elif principal.tenant_id is None:
            raise AuthorizationError("School ID is required for admin")
        else:
            users = await self.store.list_active(User, school_id=principal.tenant_id)
        return success({"users": [user_to_response(u) for u in users]}, "Users fetched successfully")
