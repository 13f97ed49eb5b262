from uuid import uuid4

from app.auth.models import User
from app.auth.schemas import Principal
from app.auth.security import verify_password
from app.core.enums import Role

from conftest import admin_principal, superadmin_principal


SCHOOL = {
    "name": "Green Valley",
    "address": "12 Canal Road",
    "email": "info@greenvalley.edu",
    "phone": "04235761234",
    "website": "https://greenvalley.edu",
}


async def test_school_crud(schools) -> None:
    created = await schools.create(superadmin_principal(), SCHOOL)
    assert created.code == 201
    school_id = created.data["school"]["id"]

    duplicate = await schools.create(superadmin_principal(), SCHOOL)
    assert (duplicate.code, duplicate.message) == (409, "School already exists")

    updated = await schools.update(superadmin_principal(), school_id, {"phone": "04235760000"})
    assert updated.data["school"]["phone"] == "04235760000"
    assert updated.data["school"]["name"] == "Green Valley"

    fetched = await schools.get(admin_principal(uuid4()), school_id)
    assert (fetched.code, fetched.message) == (403, "Access denied")

    removed = await schools.delete(superadmin_principal(), school_id)
    assert removed.code == 200
    missing = await schools.get(superadmin_principal(), school_id)
    assert (missing.code, missing.message) == (404, "School not found")

    # soft-deleted names can be reused
    assert (await schools.create(superadmin_principal(), SCHOOL)).code == 201


async def test_school_writes_are_superadmin_only(schools, make_school) -> None:
    school = await make_school()
    school_id = school.id

    result = await schools.create(admin_principal(school_id), {**SCHOOL, "name": "Other"})
    assert (result.code, result.message) == (403, "Access denied")

    result = await schools.update(admin_principal(school_id), school_id, {"name": "Renamed"})
    assert result.code == 403

    own = await schools.get(admin_principal(school_id), school_id)
    assert own.code == 200


async def test_school_list_overview(schools, make_school, make_classroom, make_user, enroll) -> None:
    school = await make_school()
    room = await make_classroom(school.id)
    await make_user("admin@greenvalley.edu", Role.ADMIN, school.id)
    await enroll(room.id)

    result = await schools.list_schools(superadmin_principal())
    overview = result.data["schools"][0]
    assert overview["classroom_count"] == 1
    assert overview["student_count"] == 1
    assert [a["email"] for a in overview["admins"]] == ["admin@greenvalley.edu"]
    assert "password_hash" not in overview["admins"][0]


async def test_assign_admin(schools, store, make_school, make_user) -> None:
    school = await make_school()
    admin = await make_user("admin@school.com", Role.ADMIN)
    boss = await make_user("boss@school.com", Role.SUPERADMIN)
    school_id, admin_id, boss_id = school.id, admin.id, boss.id

    result = await schools.assign_admin(superadmin_principal(), {"user_id": str(boss_id), "school_id": str(school_id)})
    assert result.code == 400
    assert result.message == "User can not be assigned to a school as admin, Kindly check the user role"

    result = await schools.assign_admin(superadmin_principal(), {"user_id": str(admin_id), "school_id": str(uuid4())})
    assert (result.code, result.message) == (404, "School not found")

    result = await schools.assign_admin(superadmin_principal(), {"user_id": str(admin_id), "school_id": str(school_id)})
    assert result.code == 200
    assert result.data["school"]["id"] == str(school_id)
    assert (await store.find_active_by_id(User, admin_id)).school_id == school_id


async def test_create_user_and_login(users, make_school) -> None:
    school = await make_school()
    school_id = school.id
    payload = {
        "name": "Hina",
        "email": "hina@school.com",
        "password": "Password123",
        "role": "admin",
        "school_id": str(school_id),
    }

    created = await users.create_user(superadmin_principal(), payload)
    assert created.code == 201
    assert created.data["user"]["school_id"] == str(school_id)
    assert created.data["access_token"]
    assert "password_hash" not in created.data["user"]

    duplicate = await users.create_user(superadmin_principal(), payload)
    assert (duplicate.code, duplicate.message) == (409, "User already exists")

    denied = await users.create_user(admin_principal(school_id), {**payload, "email": "x@school.com"})
    assert denied.code == 403

    bad_role = await users.create_user(superadmin_principal(), {**payload, "email": "y@school.com", "role": "teacher"})
    assert (bad_role.code, bad_role.message) == (400, "role must be one of: admin, superadmin")

    login = await users.login({"email": "hina@school.com", "password": "Password123"})
    assert login.code == 200
    assert login.data["token_type"] == "bearer"

    wrong = await users.login({"email": "hina@school.com", "password": "WrongPass1"})
    assert (wrong.code, wrong.message) == (400, "Invalid email or password")
    unknown = await users.login({"email": "nobody@school.com", "password": "Password123"})
    assert unknown.message == "Invalid email or password"


async def test_change_password(users, store, make_user) -> None:
    user = await make_user("pw@school.com")
    user_id = user.id
    principal = Principal(role=Role.ADMIN, tenant_id=None, subject_id=user_id)

    result = await users.change_password(principal, {"old_password": "WrongPass1", "new_password": "NewPassword1"})
    assert (result.code, result.message) == (400, "Invalid old password")

    result = await users.change_password(principal, {"old_password": "Password123", "new_password": "Password123"})
    assert (result.code, result.message) == (400, "New password cannot be the same as old password")

    result = await users.change_password(principal, {"old_password": "Password123", "new_password": "NewPassword1"})
    assert result.code == 200
    refreshed = await store.find_active_by_id(User, user_id)
    assert verify_password("NewPassword1", refreshed.password_hash)


async def test_list_users_scoping(users, make_school, make_user) -> None:
    school = await make_school()
    school_id = school.id
    await make_user("a@school.com", Role.ADMIN, school_id)
    await make_user("b@school.com", Role.ADMIN)

    everyone = await users.list_users(superadmin_principal())
    assert len(everyone.data["users"]) == 2

    own = await users.list_users(admin_principal(school_id))
    assert [u["email"] for u in own.data["users"]] == ["a@school.com"]

    orphan = await users.list_users(admin_principal(None))
    assert (orphan.code, orphan.message) == (403, "School ID is required for admin")
