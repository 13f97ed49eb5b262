import uuid

from sqlalchemy import Column, Date, DateTime, ForeignKey, String, Uuid

from app.core.models.school import utcnow
from app.db.session import Base


class Student(Base):
    """
    Student seated in exactly one classroom.
    school_id is a copy of the classroom's school_id and is rewritten on every transfer.
    Email is unique per school among non-deleted students.
    """

    __tablename__ = "students"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    school_id = Column(Uuid, ForeignKey("schools.id"), nullable=False, index=True)
    classroom_id = Column(Uuid, ForeignKey("classrooms.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(20), nullable=False)
    gender = Column(String(10), nullable=False)
    date_of_birth = Column(Date, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)
    deleted_at = Column(DateTime(timezone=True), nullable=True, index=True)
