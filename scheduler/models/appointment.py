"""Appointment model definitions."""

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String, Text, text
from scheduler.database import ACTIVE_STATUS_PREDICATE, PENDING_STATUS_PREDICATE, Base

PENDING = 'pending'
ACCEPTED = 'accepted'
REJECTED = 'rejected'
COMPLETED = 'completed'
CANCELLED = 'cancelled'

APPOINTMENT_STATUSES = (PENDING, ACCEPTED, REJECTED, COMPLETED, CANCELLED)
ACTIVE_STATUSES = (PENDING, ACCEPTED)
TERMINAL_STATUSES = (REJECTED, COMPLETED, CANCELLED)


class Appointment(Base):
    """Represents a requested appointment slot with a representative."""
    __tablename__ = "appointments"
    __table_args__ = (
        Index('ix_appointments_user_id', 'user_id'),
        Index('ix_appointments_representative_id', 'representative_id'),
        Index('ix_appointments_representative_date', 'representative_id', 'requested_date'),
        Index('ix_appointments_user_status', 'user_id', 'status'),
        Index(
            'uq_appointments_active_slot',
            'representative_id',
            'requested_date',
            'requested_time',
            unique=True,
            sqlite_where=text(ACTIVE_STATUS_PREDICATE),
            postgresql_where=text(ACTIVE_STATUS_PREDICATE),
        ),
        Index(
            'uq_appointments_pending_user_date',
            'user_id',
            'requested_date',
            unique=True,
            sqlite_where=text(PENDING_STATUS_PREDICATE),
            postgresql_where=text(PENDING_STATUS_PREDICATE),
        ),
    )

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    representative_id = Column(Integer, ForeignKey("representatives.id"), nullable=False)
    requested_date = Column(String(10), nullable=False)
    requested_time = Column(String(5), nullable=False)
    purpose = Column(String, nullable=False)
    description = Column(Text, nullable=False, default='')
    status = Column(String, nullable=False, default=PENDING)
    rejection_reason = Column(Text)
    notes = Column(Text)
    created_at = Column(DateTime, nullable=False, default=datetime.now)
    updated_at = Column(DateTime, nullable=False, default=datetime.now)
