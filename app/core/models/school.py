"""Schools are the tenants of the platform: every classroom, student and admin user belongs to one."""
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, String, Uuid

from app.db.session import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class School(Base):
    """Tenant. Name is unique among non-deleted schools (checked in the service, not by a constraint)."""

    __tablename__ = "schools"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False, index=True)
    address = Column(String(500), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(20), nullable=False)
    website = Column(String(255), nullable=True)
    logo = Column(String(500), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)
    # Soft delete marker; non-null rows are excluded from every active query
    deleted_at = Column(DateTime(timezone=True), nullable=True, index=True)
