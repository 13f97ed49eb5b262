from httpx import AsyncClient

from app.core.enums import Role

from conftest import auth_headers, student_payload


async def test_missing_token_is_401(client: AsyncClient) -> None:
    response = await client.get("/api/v1/classrooms")
    assert response.status_code == 401
    body = response.json()
    assert body["ok"] is False
    assert body["code"] == 401


async def test_invalid_token_is_401(client: AsyncClient) -> None:
    response = await client.get("/api/v1/classrooms", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401
    assert response.json()["message"] == "Could not validate credentials"


async def test_malformed_path_id_is_400(client: AsyncClient, make_user) -> None:
    user = await make_user("root@school.com", Role.SUPERADMIN)
    response = await client.get("/api/v1/students/not-a-uuid", headers=auth_headers(user))
    assert response.status_code == 400
    assert response.json() == {
        "ok": False,
        "code": 400,
        "data": None,
        "errors": ["Invalid ID format"],
        "message": "Invalid ID format",
    }


async def test_login_endpoints(client: AsyncClient, make_user) -> None:
    await make_user("admin@school.com", Role.ADMIN, password="Password123")

    response = await client.post("/api/v1/auth/login", json={"email": "admin@school.com", "password": "Password123"})
    assert response.status_code == 200
    body = response.json()
    assert body["ok"] is True
    assert body["data"]["token_type"] == "bearer"

    response = await client.post(
        "/api/v1/auth/login-oauth", data={"username": "admin@school.com", "password": "Password123"}
    )
    assert response.status_code == 200
    assert response.json()["access_token"]

    response = await client.post("/api/v1/auth/login", json={"email": "admin@school.com", "password": "nope-nope"})
    assert response.status_code == 400
    assert response.json()["message"] == "Invalid email or password"


async def test_enroll_and_transfer_over_http(client: AsyncClient, make_user, make_school, make_classroom) -> None:
    school = await make_school()
    small = await make_classroom(school.id, capacity=1)
    big = await make_classroom(school.id, capacity=2)
    admin = await make_user("admin@school.com", Role.ADMIN, school.id)
    small_id, big_id, school_id = small.id, big.id, school.id
    headers = auth_headers(admin)

    response = await client.post("/api/v1/students", json=student_payload(small_id, email="a@student.com"), headers=headers)
    assert response.status_code == 201
    student_id = response.json()["data"]["student"]["id"]

    response = await client.post("/api/v1/students", json=student_payload(small_id, email="b@student.com"), headers=headers)
    assert response.status_code == 409
    assert "full capacity (1" in response.json()["message"]

    response = await client.patch(
        f"/api/v1/students/{student_id}/transfer", json={"target_classroom_id": str(big_id)}, headers=headers
    )
    assert response.status_code == 200
    assert response.json()["data"]["student"]["classroom_id"] == str(big_id)
    assert response.json()["data"]["student"]["school_id"] == str(school_id)

    response = await client.patch(
        f"/api/v1/students/{student_id}/transfer", json={"target_classroom_id": str(big_id)}, headers=headers
    )
    assert response.status_code == 409
    assert response.json()["message"] == "Student is already in the target classroom"

    response = await client.post("/api/v1/students", json=student_payload(small_id, email="b@student.com"), headers=headers)
    assert response.status_code == 201

    response = await client.get(f"/api/v1/students/classroom/{big_id}", headers=headers)
    assert [s["id"] for s in response.json()["data"]["students"]] == [student_id]

    response = await client.delete(f"/api/v1/students/{student_id}", headers=headers)
    assert response.status_code == 200
    response = await client.get(f"/api/v1/students/{student_id}", headers=headers)
    assert response.status_code == 404


async def test_cross_school_transfer_over_http(client: AsyncClient, make_user, make_school, make_classroom) -> None:
    school_x = await make_school()
    school_y = await make_school()
    room_x = await make_classroom(school_x.id)
    room_y = await make_classroom(school_y.id)
    admin = await make_user("admin@x.com", Role.ADMIN, school_x.id)
    root = await make_user("root@platform.com", Role.SUPERADMIN)
    room_x_id, room_y_id, y_id = room_x.id, room_y.id, school_y.id
    admin_headers, root_headers = auth_headers(admin), auth_headers(root)

    response = await client.post("/api/v1/students", json=student_payload(room_x_id), headers=admin_headers)
    student_id = response.json()["data"]["student"]["id"]

    response = await client.patch(
        f"/api/v1/students/{student_id}/transfer", json={"target_classroom_id": str(room_y_id)}, headers=admin_headers
    )
    assert response.status_code == 403
    assert response.json()["message"] == "Access denied"

    response = await client.patch(
        f"/api/v1/students/{student_id}/transfer", json={"target_classroom_id": str(room_y_id)}, headers=root_headers
    )
    assert response.status_code == 200
    assert response.json()["data"]["student"]["school_id"] == str(y_id)


async def test_classroom_resource_routes(client: AsyncClient, make_user, make_school) -> None:
    school = await make_school()
    admin = await make_user("admin@school.com", Role.ADMIN, school.id)
    school_id = school.id
    headers = auth_headers(admin)

    response = await client.post(
        "/api/v1/classrooms", json={"name": "Grade 1", "school_id": str(school_id), "capacity": 20}, headers=headers
    )
    assert response.status_code == 201
    classroom_id = response.json()["data"]["classroom"]["id"]

    response = await client.post(
        f"/api/v1/classrooms/{classroom_id}/resources",
        json={"type": "furniture", "name": "desk", "quantity": 20},
        headers=headers,
    )
    assert response.status_code == 201
    resource_id = response.json()["data"]["resource"]["id"]

    response = await client.patch(
        f"/api/v1/classrooms/{classroom_id}/resources/{resource_id}", json={"quantity": 18}, headers=headers
    )
    assert response.status_code == 200
    assert response.json()["data"]["resource"]["quantity"] == 18

    response = await client.get(f"/api/v1/classrooms/{classroom_id}", headers=headers)
    assert response.json()["data"]["classroom"]["resources"][0]["quantity"] == 18

    response = await client.delete(f"/api/v1/classrooms/{classroom_id}/resources/{resource_id}", headers=headers)
    assert response.status_code == 200


async def test_school_routes_require_superadmin(client: AsyncClient, make_user, make_school) -> None:
    school = await make_school()
    admin = await make_user("admin@school.com", Role.ADMIN, school.id)
    root = await make_user("root@platform.com", Role.SUPERADMIN)
    admin_headers, root_headers = auth_headers(admin), auth_headers(root)

    response = await client.get("/api/v1/schools", headers=admin_headers)
    assert response.status_code == 403

    response = await client.get("/api/v1/schools", headers=root_headers)
    assert response.status_code == 200
    assert len(response.json()["data"]["schools"]) == 1
