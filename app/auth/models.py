import uuid

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, Text, Uuid

from app.core.models.school import utcnow
from app.db.session import Base


class User(Base):
    """Platform user. Superadmins have no school; admins manage exactly one school once assigned."""

    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    # Unique among non-deleted users (checked in the service)
    email = Column(String(255), nullable=False, index=True)
    password_hash = Column(Text, nullable=False)
    is_temporary_password = Column(Boolean, nullable=False, default=False)
    # superadmin | admin
    role = Column(String(20), nullable=False)
    # Owning school; null for superadmins and for admins not yet assigned
    school_id = Column(Uuid, ForeignKey("schools.id"), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)
    deleted_at = Column(DateTime(timezone=True), nullable=True)
