"""
Classroom seat accounting.

check_capacity / validate_capacity count active students and compare with the
classroom capacity read just before the call. Nothing holds that count steady
until the following write, so two concurrent enrollments into the last seat may
both pass.

claim_seat / release_seat keep Classroom.occupancy in step with student writes
inside the caller's transaction. In strict mode claim_seat is a conditional
update (occupancy < capacity) that loses cleanly instead of over-filling.
"""
from dataclasses import dataclass
from typing import Any, Optional

from sqlalchemy import update

from app.core.enums import CapacityMode
from app.core.exceptions import ConflictError
from app.core.models import Classroom, Student
from app.db.store import EntityStore, parse_id


@dataclass(frozen=True)
class CapacityCheck:
    available: bool
    current_count: int
    capacity: int


def full_capacity_message(capacity: int) -> str:
    return f"Classroom is at full capacity ({capacity} students)"


class CapacityGuard:
    def __init__(self, store: EntityStore, mode: CapacityMode = CapacityMode.OPTIMISTIC) -> None:
        self.store = store
        self.mode = CapacityMode(mode)

    async def check_capacity(
        self,
        classroom_id: Any,
        capacity: int,
        exclude_occupant_id: Optional[Any] = None,
    ) -> CapacityCheck:
        criteria = []
        exclude = parse_id(exclude_occupant_id)
        if exclude is not None:
            criteria.append(Student.id != exclude)
        current_count = await self.store.count_active(
            Student, *criteria, classroom_id=parse_id(classroom_id)
        )
        return CapacityCheck(
            available=current_count < capacity,
            current_count=current_count,
            capacity=capacity,
        )

    async def validate_capacity(
        self,
        classroom_id: Any,
        capacity: int,
        exclude_occupant_id: Optional[Any] = None,
    ) -> Optional[str]:
        """Conflict message when the classroom is full, None when there is room."""
        check = await self.check_capacity(classroom_id, capacity, exclude_occupant_id)
        if not check.available:
            return full_capacity_message(check.capacity)
        return None

    async def claim_seat(self, classroom: Classroom) -> None:
        stmt = update(Classroom).where(Classroom.id == classroom.id, Classroom.deleted_at.is_(None))
        if self.mode is CapacityMode.STRICT:
            stmt = stmt.where(Classroom.occupancy < Classroom.capacity)
        result = await self.store.session.execute(
            stmt.values(occupancy=Classroom.occupancy + 1).execution_options(synchronize_session=False)
        )
        if result.rowcount == 0 and self.mode is CapacityMode.STRICT:
            raise ConflictError(full_capacity_message(classroom.capacity))

    async def release_seat(self, classroom_id: Any) -> None:
        await self.store.session.execute(
            update(Classroom)
            .where(Classroom.id == parse_id(classroom_id), Classroom.occupancy > 0)
            .values(occupancy=Classroom.occupancy - 1)
            .execution_options(synchronize_session=False)
        )
