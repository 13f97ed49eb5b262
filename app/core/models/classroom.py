import uuid

from sqlalchemy import JSON, CheckConstraint, Column, DateTime, ForeignKey, Integer, String, Uuid

from app.core.models.school import utcnow
from app.db.session import Base


class Classroom(Base):
    """
    Classroom owned by a school, with a fixed seat capacity.

    - occupancy: denormalized count of active students, moved in the same transaction
      as the student write. Only consulted for the conditional seat claim in strict mode.
    - resources: ordered list of {id, type, name, quantity} items, persisted with the classroom.
    """

    __tablename__ = "classrooms"
    __table_args__ = (
        CheckConstraint("capacity >= 1", name="ck_classroom_capacity_positive"),
        CheckConstraint("occupancy >= 0", name="ck_classroom_occupancy_non_negative"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    school_id = Column(Uuid, ForeignKey("schools.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    capacity = Column(Integer, nullable=False)
    occupancy = Column(Integer, nullable=False, default=0)
    resources = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)
    deleted_at = Column(DateTime(timezone=True), nullable=True, index=True)
