import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")

from typing import AsyncGenerator, Optional  # noqa: E402
from uuid import UUID, uuid4  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

import app.auth.models  # noqa: E402,F401
import app.core.models  # noqa: E402,F401
from app.api.deps import get_validator  # noqa: E402
from app.api.v1.classrooms.resources import ClassroomResourceLedger  # noqa: E402
from app.api.v1.classrooms.service import ClassroomService  # noqa: E402
from app.api.v1.schools.service import SchoolService  # noqa: E402
from app.api.v1.students.enrollment import EnrollmentService  # noqa: E402
from app.api.v1.students.service import StudentService  # noqa: E402
from app.api.v1.students.transfer import TransferCoordinator  # noqa: E402
from app.api.v1.users.service import UserService  # noqa: E402
from app.auth.models import User  # noqa: E402
from app.auth.schemas import Principal  # noqa: E402
from app.auth.security import hash_password, token_for_user  # noqa: E402
from app.core.capacity import CapacityGuard  # noqa: E402
from app.core.enums import CapacityMode, Role  # noqa: E402
from app.core.models import Classroom, School  # noqa: E402
from app.db.session import Base, get_db  # noqa: E402
from app.db.store import EntityStore  # noqa: E402
from app.main import app  # noqa: E402


TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture()
async def engine():
    """Fresh in-memory SQLite database per test; StaticPool keeps the single connection alive."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        future=True,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture()
async def db_session(engine) -> AsyncGenerator[AsyncSession, None]:
    """Provide a database session for a test and override FastAPI dependency."""
    async_session = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:

        async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
            yield session

        app.dependency_overrides[get_db] = override_get_db
        yield session

    app.dependency_overrides.clear()


@pytest.fixture()
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client bound to the FastAPI app."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture()
def store(db_session: AsyncSession) -> EntityStore:
    return EntityStore(db_session)


@pytest.fixture()
def validator():
    return get_validator()


@pytest.fixture()
def capacity(store: EntityStore) -> CapacityGuard:
    return CapacityGuard(store, CapacityMode.OPTIMISTIC)


@pytest.fixture()
def strict_capacity(store: EntityStore) -> CapacityGuard:
    return CapacityGuard(store, CapacityMode.STRICT)


@pytest.fixture()
def enrollment(store, validator, capacity) -> EnrollmentService:
    return EnrollmentService(store, validator, capacity)


@pytest.fixture()
def coordinator(store, validator, capacity) -> TransferCoordinator:
    return TransferCoordinator(store, validator, capacity)


@pytest.fixture()
def students(store, capacity) -> StudentService:
    return StudentService(store, capacity)


@pytest.fixture()
def classrooms(store, validator) -> ClassroomService:
    return ClassroomService(store, validator)


@pytest.fixture()
def ledger(store, validator) -> ClassroomResourceLedger:
    return ClassroomResourceLedger(store, validator)


@pytest.fixture()
def schools(store, validator) -> SchoolService:
    return SchoolService(store, validator)


@pytest.fixture()
def users(store, validator) -> UserService:
    return UserService(store, validator)


def superadmin_principal() -> Principal:
    return Principal(role=Role.SUPERADMIN, tenant_id=None, subject_id=uuid4())


def admin_principal(school_id: Optional[UUID]) -> Principal:
    return Principal(role=Role.ADMIN, tenant_id=school_id, subject_id=uuid4())


@pytest.fixture()
def make_school(store: EntityStore):
    counter = {"n": 0}

    async def _make(name: Optional[str] = None) -> School:
        counter["n"] += 1
        school = await store.create(
            School,
            name=name or f"School {counter['n']}",
            address="1 Main Street",
            email=f"office{counter['n']}@school.com",
            phone="0123456789",
        )
        await store.commit()
        return school

    return _make


@pytest.fixture()
def make_classroom(store: EntityStore):
    counter = {"n": 0}

    async def _make(school_id: UUID, capacity: int = 2, name: Optional[str] = None, resources=None) -> Classroom:
        counter["n"] += 1
        classroom = await store.create(
            Classroom,
            school_id=school_id,
            name=name or f"Room {counter['n']}",
            capacity=capacity,
            occupancy=0,
            resources=resources or [],
        )
        await store.commit()
        return classroom

    return _make


def student_payload(classroom_id, email: str = "ali@student.com", **overrides) -> dict:
    payload = {
        "name": "Ali Khan",
        "email": email,
        "phone": "03001234567",
        "gender": "male",
        "date_of_birth": "2012-05-17",
        "classroom_id": str(classroom_id),
    }
    payload.update(overrides)
    return payload


@pytest.fixture()
def enroll(enrollment: EnrollmentService):
    """Enroll through the service (so seat counters move) and return the created student's id."""
    counter = {"n": 0}

    async def _enroll(classroom_id: UUID, email: Optional[str] = None) -> UUID:
        counter["n"] += 1
        result = await enrollment.enroll(
            superadmin_principal(),
            student_payload(classroom_id, email=email or f"student{counter['n']}@student.com"),
        )
        assert result.ok, result.message
        return UUID(result.data["student"]["id"])

    return _enroll


@pytest.fixture()
def make_user(store: EntityStore):
    async def _make(
        email: str,
        role: Role = Role.ADMIN,
        school_id: Optional[UUID] = None,
        password: str = "Password123",
    ) -> User:
        user = await store.create(
            User,
            name="Test User",
            email=email,
            password_hash=hash_password(password),
            role=role.value,
            school_id=school_id,
        )
        await store.commit()
        return user

    return _make


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {token_for_user(user)}"}
